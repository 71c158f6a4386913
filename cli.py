import typer

from src.cli.config import handle_config_command
from src.cli.run import handle_run_command

app = typer.Typer(help="VCスレッド連携Bot CLI")


@app.command()
def run() -> None:
    """Botを起動"""
    handle_run_command()


@app.command()
def config() -> None:
    """解決済みの設定を表示"""
    handle_config_command()


if __name__ == "__main__":
    app()
