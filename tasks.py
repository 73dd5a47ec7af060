# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create the development environment with uv."""
    ctx.run("uv sync --extra test --extra dev")


@task
def lint(ctx):
    """
    Check style and types of the package and its tests.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=leafrelay --cov-report=term-missing", pty=True)


@task
def mock(ctx, port=16021):
    """Run a mock Nanoleaf device with its pairing window open."""
    ctx.run(f"leafrelay mock --port {port} --pairing-open", pty=True)


@task
def serve(ctx):
    """Run the relay server using the local configuration."""
    ctx.run("leafrelay serve", pty=True)


@task
def build_package(ctx):
    """
    Build package using uv.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")
