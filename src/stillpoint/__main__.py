from .terminal import run

run()
