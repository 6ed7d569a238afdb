from japa.app import run

run()
