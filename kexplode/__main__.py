from kexplode.cli import app

app(prog_name="kexplode")
