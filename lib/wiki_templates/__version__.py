__title__ = 'wiki_templates'
__description__ = 'Backtracking recursive-descent parser for MediaWiki template invocations'
__url__ = 'https://github.com/dskrypa/wiki_templates'
__version__ = '0.1.0'
__author__ = 'Doug Skrypa'
__author_email__ = 'dskrypa@gmail.com'
