from orbitalview.main import run

run()
