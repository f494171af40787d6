from switchboard.main import run

run()
