import click
from rich.console import Console
from rich.table import Table
from contextlib import contextmanager
import logging

from ..config.manager import ConfigManager
from ..errors import CaliError, EventNotFoundError
from ..models.calendar import Calendar
from ..models.event import Event, Recurring
from ..services.calendar_store import CalendarStore
from ..utils.time import format_offset, get_local_offset

logger = logging.getLogger(__name__)

console = Console()

RECURRING_CHOICES = [r.value for r in Recurring]


@contextmanager
def reported_errors():
    """Turn calendar failures into a printed message and exit status 1"""
    try:
        yield
    except CaliError as e:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(e)) from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def configure_logging(config_manager: ConfigManager):
    logging.basicConfig(
        level=config_manager.get('development.log_level', 'WARNING'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def resolve_calendar_name(config_manager: ConfigManager, calendar_name=None) -> str:
    """Explicit name, else the stored default, else the configured fallback"""
    if calendar_name:
        return calendar_name

    store = CalendarStore(config_manager.get('app.database_path'))
    store.initialize()
    default_name = store.get_default_name()
    if default_name is not None:
        return default_name
    return config_manager.get('app.default_calendar_name')


def open_calendar(config_manager: ConfigManager, calendar_name=None) -> Calendar:
    name = resolve_calendar_name(config_manager, calendar_name)
    return Calendar.load_or_create(name, config_manager.get('app.database_path'))


def find_single_event(calendar: Calendar, event_name: str) -> Event:
    events = calendar.find_events(event_name, exact=True)
    if not events:
        raise EventNotFoundError(f"No event named '{event_name}' in '{calendar.name}'.")
    if len(events) > 1:
        raise EventNotFoundError(
            f"{len(events)} events named '{event_name}' in '{calendar.name}'; rename one first."
        )
    return events[0]


def events_table(calendar: Calendar, events, offset) -> Table:
    table = Table(
        title=f"{calendar.name} ({format_offset(offset)})",
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Event")
    table.add_column("Start", style="dim")
    table.add_column("End", style="dim")
    table.add_column("Recurring")
    table.add_column("ID", style="dim")

    for event in events:
        table.add_row(event.name, event.start, event.end, str(event.recurring), str(event.id)[:8])
    return table


CALENDAR_COMMAND = 'calendar'


class CalendarGroup(click.Group):
    """Group that treats anything other than a subcommand as `calendar` arguments.

    `cali work -s` runs `cali calendar work -s` and a bare `cali` runs
    `cali calendar`. A calendar whose name matches a subcommand has to be
    given through `cali calendar NAME`.
    """

    def parse_args(self, ctx, args):
        args = list(args)
        takes_value = {
            opt
            for param in self.params
            if isinstance(param, click.Option) and not param.is_flag
            for opt in param.opts + param.secondary_opts
        }

        position = 0
        while position < len(args):
            token = args[position]
            if token in takes_value:
                position += 2
            elif token.split('=', 1)[0] in takes_value:
                position += 1
            else:
                break

        if position == len(args):
            args.append(CALENDAR_COMMAND)
        elif position < len(args) and args[position] not in self.commands \
                and args[position] not in ctx.help_option_names:
            args.insert(position, CALENDAR_COMMAND)
        return super().parse_args(ctx, args)


@click.group(cls=CalendarGroup)
@click.option('--config', '-c', help='Path to .env config file')
@click.option('--db', 'db_path', type=click.Path(dir_okay=False), help='Path to the calendar database')
@click.pass_context
def cli(ctx, config, db_path):
    """cali - a simple to use command line calendar"""
    config_manager = ConfigManager(config)
    if db_path:
        config_manager.set('app.database_path', db_path)
    configure_logging(config_manager)
    config_manager.ensure_directories()
    ctx.obj = config_manager


@cli.command(CALENDAR_COMMAND)
@click.argument('calendar_name', required=False)
@click.option('--delete', '-d', is_flag=True, help='Deletes the specified calendar')
@click.option('--rename', '-r', is_flag=True, help='Renames the specified calendar')
@click.option('--set-default', '-s', is_flag=True, help='Sets the specified calendar as default')
@click.pass_obj
def calendar(config_manager, calendar_name, delete, rename, set_default):
    """Select a calendar and manage it.

    If no calendar exists under CALENDAR_NAME a new one is created. Without a
    name the default calendar is used, or "default calendar" when there is no
    default yet.
    """
    with reported_errors():
        cal = open_calendar(config_manager, calendar_name)

        if delete:
            cal.delete()
            console.print(f"[green]'{cal.name}' was deleted.[/green]")
            return

        if rename:
            old_name = cal.name
            new_name = click.prompt(f"Enter a new name for calendar '{old_name}'")
            cal.rename(new_name)
            console.print(f"[green]'{old_name}' was renamed to '{cal.name}'.[/green]")

        if set_default:
            cal.set_default()
            if cal.has_events():
                console.print(f"[green]'{cal.name}' is now set as default.[/green]")
            else:
                console.print(f"[yellow]'{cal.name}' has no events yet, so no calendar is default now.[/yellow]")

        if not (rename or set_default):
            marker = " (default)" if cal.default else ""
            console.print(f"Using calendar [bold]{cal.name}[/bold]{marker}")


@cli.command('list')
@click.pass_obj
def list_calendars(config_manager):
    """List calendars"""
    with reported_errors():
        store = CalendarStore(config_manager.get('app.database_path'))
        store.initialize()
        calendars = store.list_calendars()

    if not calendars:
        console.print("[yellow]No calendars found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Calendar")
    table.add_column("Default", style="dim")
    for name, is_default in calendars:
        table.add_row(name, "yes" if is_default else "")
    console.print(table)


@cli.command()
@click.argument('event_name')
@click.option('--start', required=True, help='Event start')
@click.option('--end', required=True, help='Event end')
@click.option('--recurring', type=click.Choice(RECURRING_CHOICES), default=Recurring.NO.value,
              show_default=True, help='Recurrence tag')
@click.option('--calendar', '-C', 'calendar_name', help='Calendar to use (default calendar if omitted)')
@click.pass_obj
def add(config_manager, event_name, start, end, recurring, calendar_name):
    """Add an event"""
    with reported_errors():
        cal = open_calendar(config_manager, calendar_name)
        event = Event.create_new(event_name, start, end, Recurring.from_text(recurring))
        cal.add_event(event)
    console.print(f"\n[green]✓[/green] Added [bold]{event.name}[/bold] to '{cal.name}'")
    console.print(f"   {event.start} - {event.end}")


@cli.command()
@click.argument('query')
@click.option('--exact', is_flag=True, help='Match the full event name')
@click.option('--calendar', '-C', 'calendar_name', help='Calendar to use (default calendar if omitted)')
@click.pass_obj
def search(config_manager, query, exact, calendar_name):
    """Search events by name"""
    with reported_errors():
        cal = open_calendar(config_manager, calendar_name)
        events = cal.find_events(query, exact=exact)

    if not events:
        console.print("[yellow]No events found[/yellow]")
        return

    offset = get_local_offset(config_manager.get('app.timezone'))
    console.print(events_table(cal, events, offset))


@cli.command()
@click.argument('event_name')
@click.option('--name', 'new_name', help='New event name')
@click.option('--start', help='New event start')
@click.option('--end', help='New event end')
@click.option('--calendar', '-C', 'calendar_name', help='Calendar to use (default calendar if omitted)')
@click.pass_obj
def update(config_manager, event_name, new_name, start, end, calendar_name):
    """Update an event found by its exact name"""
    if not any([new_name, start, end]):
        raise click.UsageError("Nothing to update, pass --name, --start or --end.")

    with reported_errors():
        cal = open_calendar(config_manager, calendar_name)
        event = find_single_event(cal, event_name)
        if new_name:
            event.update_name(new_name)
        if start:
            event.update_start(start)
        if end:
            event.update_end(end)
        cal.update_event(event)
    console.print("[green]Event updated successfully[/green]")


@cli.command()
@click.argument('event_name')
@click.option('--calendar', '-C', 'calendar_name', help='Calendar to use (default calendar if omitted)')
@click.pass_obj
def remove(config_manager, event_name, calendar_name):
    """Remove an event found by its exact name"""
    with reported_errors():
        cal = open_calendar(config_manager, calendar_name)
        event = find_single_event(cal, event_name)
        cal.remove_event(event)
    console.print(f"[green]'{event.name}' was removed from '{cal.name}'.[/green]")


def main():
    cli()


if __name__ == '__main__':
    main()
