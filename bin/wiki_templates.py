#!/usr/bin/env python

import sys
from functools import cached_property
from pathlib import Path

from cli_command_parser import Command, Option, Flag, Positional, SubCommand, ParamGroup, main

from wiki_templates.__version__ import __author_email__, __version__  # noqa


class WikiTemplates(Command, description='Parse the templates in MediaWiki wikitext', option_name_mode='-'):
    sub_cmd = SubCommand()
    debug = Flag('-d', help='Show debug logging')

    def _init_command_(self):
        import logging

        if self.debug:
            logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(levelname)s %(name)s %(lineno)d %(message)s')
        else:
            logging.basicConfig(level=logging.INFO, format='%(message)s')


class Show(WikiTemplates, help='Show the parsed structure of a wiki text file'):
    MODES = ('reprs', 'templates', 'titles')
    path = Positional(help='Path to a file containing wiki text, or - to read from stdin')
    with ParamGroup('Output Options'):
        mode = Option('-m', choices=MODES, default='reprs', help='Display mode')
        title = Option('-t', help='Only show templates with the given title (case-insensitive; includes nested templates)')
        trace = Flag('-T', help='Log each grammar rule as it is entered (requires --debug to be visible)')

    def main(self):
        for node in self.get_nodes():
            if self.mode == 'titles':
                print(node.title)
            else:
                node.pprint()

    @cached_property
    def page(self):
        from wiki_templates import parse

        text = sys.stdin.read() if self.path == '-' else Path(self.path).read_text('utf-8')
        return parse(text, trace=self.trace)

    def get_nodes(self):
        from wiki_templates import Template

        if self.title:
            return self.page.find_all(Template, recurse=True, lc_title=self.title.lower())
        elif self.mode == 'reprs':
            return (self.page,)
        return self.page.find_all(Template, recurse=True)


class Check(WikiTemplates, help='Verify that the given wiki text files can be parsed'):
    paths = Positional(nargs='+', help='Paths to files containing wiki text')

    def main(self):
        from wiki_templates import ParseError, parse

        failed = 0
        for path in map(Path, self.paths):
            try:
                page = parse(path.read_text('utf-8'))
            except ParseError as e:
                failed += 1
                print(f'{path.as_posix()}: {e}')
            else:
                print(f'{path.as_posix()}: OK ({len(page)} elements, {len(page.templates)} top-level templates)')

        if failed:
            sys.exit(1)


if __name__ == '__main__':
    main()
