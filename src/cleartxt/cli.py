"""
Command Line Interface for clear-txt.

Works on the same todo file as the gesture UI, through the same list model,
so every command is saved immediately and shares the file format.
"""

import click
from pathlib import Path
from .version import VERSION
from .config import load_settings
from .data.io import TextStore
from .listmodel import ListModel
from .logs import setup_logging, get_logger
from .notify import Notifier
from .recovery import ConfigError
from .scheduler import ManualScheduler

log = get_logger("cli")


class App:
    """A loaded list plus the notifier its save errors go to."""

    def __init__(self, settings, file_path=None):
        self.settings = settings
        self.path = Path(file_path) if file_path else settings.data_path
        self.notifier = Notifier(ManualScheduler(), settings.notice_duration)
        self.model = ListModel(TextStore(self.path), self.notifier)
        self.model.load()

    def check(self):
        """Turn a pending notification into a non-zero exit."""
        if self.notifier.visible:
            raise click.ClickException(self.notifier.message)

    def resolve(self, number):
        """1-based visible number -> storage position."""
        position = self.model.storage_position(number - 1)
        if position is None:
            raise click.ClickException(f"No task #{number} (list has {len(self.model)}).")
        return position


def _display(text):
    if not text:
        return "<empty>"
    # Undecodable bytes from the file are kept as surrogates; show them as U+FFFD
    text = text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
    return text.replace("\n", " / ")


@click.group()
@click.version_option(version=VERSION, prog_name="clear-txt")
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory holding todos.txt and settings.yml')
@click.option('--file', '-f', 'file_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Todo file to use instead of the one in the data directory')
@click.pass_context
def main(ctx, data_dir, file_path):
    """
    clear-txt - a gesture-driven todo list kept in a plain text file.

    Tasks are numbered the way they are shown: open tasks first, then
    completed ones.
    """
    try:
        settings = load_settings(data_dir=data_dir)
    except ConfigError as e:
        raise click.ClickException(str(e))
    setup_logging(settings.log_dir, settings.log_level)
    ctx.obj = App(settings, file_path)
    log.debug(f"Using todo file {ctx.obj.path}")
    ctx.obj.check()


@main.command('list')
@click.option('--all/--open', 'show_all', default=True, help='Include completed tasks')
@click.pass_obj
def list_tasks(app, show_all):
    """Show the list in display order."""
    for number, task in enumerate(app.model.sorted_tasks(), start=1):
        if task.completed and not show_all:
            continue
        marker = "[x]" if task.completed else "[ ]"
        click.echo(f"{number:>3}. {marker} {_display(task.text)}")


@main.command()
@click.argument('text')
@click.pass_obj
def add(app, text):
    """Add a task at the top of the list."""
    text = text.strip()
    if not text:
        raise click.ClickException("Task text required.")
    app.model.insert_at_head(text)
    app.model.finish_editing()
    app.check()
    click.echo(f"✅ Added: {text}")


@main.command()
@click.argument('number', type=int)
@click.argument('text')
@click.pass_obj
def edit(app, number, text):
    """Replace the text of task NUMBER; empty text deletes it."""
    position = app.resolve(number)
    app.model.edit(position, text.strip())
    app.check()
    click.echo(f"✏️  Edited {number}." if text.strip() else f"🗑️  Removed {number}.")


@main.command()
@click.argument('number', type=int)
@click.pass_obj
def toggle(app, number):
    """Mark task NUMBER complete, or open again."""
    position = app.resolve(number)
    app.model.toggle_completed(position)
    app.check()
    state = "completed" if app.model[position].completed else "reopened"
    click.echo(f"✔️  {_display(app.model[position].text)} {state}.")


@main.command()
@click.argument('number', type=int)
@click.pass_obj
def rm(app, number):
    """Delete task NUMBER."""
    position = app.resolve(number)
    text = app.model[position].text
    app.model.delete(position)
    app.check()
    click.echo(f"🗑️  Removed: {_display(text)}")


@main.command()
@click.pass_obj
def path(app):
    """Print the todo file location."""
    click.echo(str(app.path.resolve()))


@main.command('config')
@click.pass_obj
def show_config(app):
    """Print the effective settings as YAML."""
    click.echo(app.settings.to_yaml(), nl=False)


if __name__ == '__main__':
    main()
