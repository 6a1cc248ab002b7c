from townhall_exporter.cmd.main import run

run()
