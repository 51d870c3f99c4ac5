from contribcheck.cli import run

run()
