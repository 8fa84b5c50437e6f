from icecream_api.main import run

run()
