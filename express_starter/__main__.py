from express_starter.cli import run

run()
