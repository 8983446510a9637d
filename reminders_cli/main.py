#!/usr/bin/env python3
"""
reminders - Interact with macOS Reminders from the command line.
"""

import argparse
import logging
import sys
from typing import Optional

from .commands import (
    AddCommand,
    CompleteCommand,
    DeleteCommand,
    EditCommand,
    NewListCommand,
    ShowCommand,
    ShowListsCommand,
)
from .core.config import get_default_config_path, load_config
from .core.exceptions import ConfigurationError, RemindersCliError
from .core.models import AddRequest, DueDate, EditRequest, Priority, Recurrence
from .query.filters import FilterCriteria
from .query.presenter import OutputFormat
from .query.sorting import SortKey, SortOrder
from .utils.date import parse_date_argument


def _date_arg(value: str) -> DueDate:
    try:
        return parse_date_argument(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _priority_arg(value: str) -> Optional[Priority]:
    try:
        return Priority.parse(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _add_format_option(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--format', '-f',
        choices=[fmt.value for fmt in OutputFormat],
        default=None,
        help="format, either of 'plain' or 'json'"
    )


def _add_show_options(parser: argparse.ArgumentParser, sortable: bool):
    parser.add_argument('--only-completed', action='store_true', help='Show completed items only')
    parser.add_argument('--include-completed', action='store_true', help='Include completed items in output')
    parser.add_argument(
        '--include-overdue', action='store_true',
        help='When using --due-date, also include items due before the due date'
    )
    parser.add_argument('--has-due-date', action='store_true', help='Only show reminders that have a due date set')
    parser.add_argument('--due-date', '-d', type=_date_arg, help='Show only reminders due on this date')
    parser.add_argument('--flagged', action='store_true', help='Only show flagged reminders')
    parser.add_argument('--tag', help='Only show reminders with this tag (without #)')
    parser.add_argument('--section', help='Only show reminders in this section')
    if sortable:
        parser.add_argument(
            '--sort', '-s',
            choices=SortKey.choices(),
            default=SortKey.NONE.value,
            help=f"Show the reminders in a specific order, one of: {', '.join(SortKey.choices())}"
        )
        parser.add_argument(
            '--sort-order', '-o',
            choices=SortOrder.choices(),
            default=SortOrder.ASCENDING.value,
            help='How the sort order should be applied'
        )
    _add_format_option(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='reminders',
        description="Interact with macOS Reminders from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reminders show-lists
  reminders show Groceries --due-date today --include-overdue
  reminders show-all --flagged --format json
  reminders add Groceries Buy milk --due-date "tomorrow 9am" --priority high
  reminders edit Groceries 0 --notes "2 litres" --flagged
  reminders complete Groceries 0
        """
    )

    parser.add_argument(
        '--config',
        help=f'Path to configuration file (default: {get_default_config_path()})',
        default=None
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    lists_parser = subparsers.add_parser('show-lists', help='Print the name of lists to pass to other commands')
    lists_parser.add_argument('--color', action='store_true', help='Show list color as hex')
    _add_format_option(lists_parser)

    all_parser = subparsers.add_parser('show-all', help='Print all reminders')
    _add_show_options(all_parser, sortable=True)

    show_parser = subparsers.add_parser('show', help='Print the items on the given list')
    show_parser.add_argument('list_name', help="The list to print items from, see 'show-lists' for names")
    _add_show_options(show_parser, sortable=True)

    add_parser = subparsers.add_parser('add', help='Add a reminder to a list')
    add_parser.add_argument('list_name', help="The list to add to, see 'show-lists' for names")
    add_parser.add_argument('reminder', nargs='+', help='The reminder contents')
    add_parser.add_argument('--due-date', '-d', type=_date_arg, help='The date the reminder is due')
    add_parser.add_argument('--priority', '-p', type=_priority_arg, default=None,
                            help='The priority of the reminder: none, low, medium, high')
    add_parser.add_argument('--notes', '-n', help='The notes to add to the reminder')
    add_parser.add_argument('--url', '-u', help='A URL to associate with the reminder')
    add_parser.add_argument('--remind-me-date', type=_date_arg,
                            help='Set a remind-me date/time for the alarm notification')
    add_parser.add_argument('--recurrence', choices=Recurrence.choices(),
                            help=f"Set a recurrence rule, one of: {', '.join(Recurrence.choices())}")
    add_parser.add_argument('--flagged', action='store_true', help='Flag the reminder')
    _add_format_option(add_parser)

    for name, help_text in (('complete', 'Complete a reminder'),
                            ('uncomplete', 'Uncomplete a reminder'),
                            ('delete', 'Delete a reminder')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('list_name', help="The list the reminder is on, see 'show-lists' for names")
        sub.add_argument('index', help="The index or id of the reminder, see 'show' for indexes")

    edit_parser = subparsers.add_parser('edit', help='Edit the text of a reminder')
    edit_parser.add_argument('list_name', help="The list to edit a reminder on, see 'show-lists' for names")
    edit_parser.add_argument('index', help="The index or id of the reminder, see 'show' for indexes")
    edit_parser.add_argument('reminder', nargs='*', help='The new reminder contents')
    edit_parser.add_argument('--due-date', '-d', type=_date_arg, help='The new date the reminder is due')
    edit_parser.add_argument('--clear-due-date', action='store_true', help='Clear the due date')
    edit_parser.add_argument('--priority', '-p', type=_priority_arg, default=None,
                             help='The new priority of the reminder')
    edit_parser.add_argument('--clear-priority', action='store_true', help='Clear the priority of the reminder')
    edit_parser.add_argument('--notes', '-n', help='The notes to set on the reminder, overwriting previous notes')
    edit_parser.add_argument('--url', '-u', help='A URL to associate with the reminder')
    edit_parser.add_argument('--clear-url', action='store_true', help='Clear the URL of the reminder')
    edit_parser.add_argument('--remind-me-date', type=_date_arg,
                             help='Set a remind-me date/time for the alarm notification')
    edit_parser.add_argument('--clear-remind-me-date', action='store_true', help='Clear the remind-me date alarm')
    edit_parser.add_argument('--recurrence', choices=Recurrence.choices(), help='Set a recurrence rule')
    edit_parser.add_argument('--clear-recurrence', action='store_true', help='Clear the recurrence rule')
    flag_group = edit_parser.add_mutually_exclusive_group()
    flag_group.add_argument('--flagged', action='store_true', help='Flag the reminder')
    flag_group.add_argument('--unflag', action='store_true', help='Remove the flag from the reminder')

    new_list_parser = subparsers.add_parser('new-list', help='Create a new list')
    new_list_parser.add_argument('list_name', help='The name of the new list')
    new_list_parser.add_argument(
        '--source', '-s',
        help='The name of the source of the list, if all your lists use the same source it will default to that'
    )

    return parser


def _configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')


def _output_format(args, config) -> OutputFormat:
    return OutputFormat(args.format or config.default_format)


def _edit_request(args) -> EditRequest:
    text = " ".join(args.reminder)
    flagged = None
    if args.flagged:
        flagged = True
    elif args.unflag:
        flagged = False
    return EditRequest(
        title=text or None,
        notes=args.notes,
        url=args.url,
        clear_url=args.clear_url,
        due=args.due_date,
        clear_due=args.clear_due_date,
        priority=args.priority,
        clear_priority=args.clear_priority,
        remind_me=args.remind_me_date.to_datetime() if args.remind_me_date else None,
        clear_remind_me=args.clear_remind_me_date,
        recurrence=Recurrence(args.recurrence) if args.recurrence else None,
        clear_recurrence=args.clear_recurrence,
        flagged=flagged,
    )


def main(argv=None):
    """Main entry point for reminders."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)

        if args.command == 'show-lists':
            cmd = ShowListsCommand(config, verbose=args.verbose)
            success = cmd.run(output_format=_output_format(args, config), show_color=args.color)

        elif args.command in ('show', 'show-all'):
            criteria = FilterCriteria.from_flags(
                only_completed=args.only_completed,
                include_completed=args.include_completed,
                has_due_date=args.has_due_date,
                due_on=args.due_date.day if args.due_date else None,
                include_overdue=args.include_overdue,
                only_flagged=args.flagged,
                required_tag=args.tag,
                required_section=args.section,
            )
            cmd = ShowCommand(config, verbose=args.verbose)
            success = cmd.run(
                list_name=getattr(args, 'list_name', None),
                criteria=criteria,
                sort_key=SortKey(args.sort),
                sort_order=SortOrder(args.sort_order),
                output_format=_output_format(args, config),
            )

        elif args.command == 'add':
            request = AddRequest(
                title=" ".join(args.reminder),
                notes=args.notes,
                url=args.url,
                due=args.due_date,
                priority=args.priority,
                remind_me=args.remind_me_date.to_datetime() if args.remind_me_date else None,
                recurrence=Recurrence(args.recurrence) if args.recurrence else None,
                flagged=args.flagged,
            )
            cmd = AddCommand(config, verbose=args.verbose)
            success = cmd.run(args.list_name, request, output_format=_output_format(args, config))

        elif args.command == 'edit':
            cmd = EditCommand(config, verbose=args.verbose)
            success = cmd.run(args.list_name, args.index, _edit_request(args))

        elif args.command in ('complete', 'uncomplete'):
            cmd = CompleteCommand(config, verbose=args.verbose)
            success = cmd.run(args.list_name, args.index, complete=args.command == 'complete')

        elif args.command == 'delete':
            cmd = DeleteCommand(config, verbose=args.verbose)
            success = cmd.run(args.list_name, args.index)

        elif args.command == 'new-list':
            cmd = NewListCommand(config, verbose=args.verbose)
            success = cmd.run(args.list_name, source=args.source)

        else:
            print(f"Unknown command '{args.command}'.", file=sys.stderr)
            return 1

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except RemindersCliError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if not args.verbose:
            print("Re-run with --verbose for more detail.", file=sys.stderr)
        else:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
