#!/usr/bin/env python

from unittest import main, TestCase

import regex

from wiki_templates.exceptions import ParseError, NestingDepthError
from wiki_templates.parsing import Parser, Match, Failure, rule
from wiki_templates.parsing.cursor import Position
from wiki_templates.testing import TraceRecorder

WORD = regex.compile(r'\w+')


class ResultTest(TestCase):
    def test_empty_match_is_truthy(self):
        self.assertTrue(Match([]))
        self.assertTrue(Match(None))

    def test_failure_is_falsy(self):
        self.assertFalse(Failure(Position(1, 1, 0), 'nope'))

    def test_reprs(self):
        self.assertEqual("<Match('a')>", repr(Match('a')))
        self.assertEqual("<Failure('nope' @ line 1, column 2)>", repr(Failure(Position(1, 2, 1), 'nope')))


class ExpectTest(TestCase):
    def test_expect_consumes_literal(self):
        parser = Parser('{{x')
        self.assertEqual(Match('{{'), parser.expect('{{'))
        self.assertEqual(2, parser.cursor.offset)

    def test_expect_skips_leading_whitespace(self):
        parser = Parser('  \n |x')
        self.assertEqual(Match('|'), parser.expect('|'))
        self.assertEqual(5, parser.cursor.offset)

    def test_expect_failure_does_not_consume(self):
        parser = Parser('  x')
        result = parser.expect('|')
        self.assertFalse(result)
        self.assertEqual("Expected '|'", result.reason)
        self.assertEqual(Position(1, 3, 2), result.position)
        self.assertEqual(0, parser.cursor.offset)

    def test_expect_pattern(self):
        parser = Parser(' foo bar')
        self.assertEqual(Match('foo'), parser.expect_pattern(WORD))
        self.assertEqual(Match('bar'), parser.expect_pattern(WORD))
        result = parser.expect_pattern(WORD, 'a word')
        self.assertFalse(result)
        self.assertEqual('Expected a word', result.reason)


class AnyOfTest(TestCase):
    def test_first_success_wins(self):
        parser = Parser('abc')
        result = parser.any_of(lambda: parser.expect('a'), lambda: parser.expect('ab'))
        self.assertEqual(Match('a'), result)
        self.assertEqual(1, parser.cursor.offset)

    def test_rollback_between_alternatives(self):
        parser = Parser('abd')

        def ab_c():
            if not (result := parser.expect('ab')):
                return result
            return parser.expect('c')

        result = parser.any_of(ab_c, lambda: parser.expect('abd'))
        self.assertEqual(Match('abd'), result)
        self.assertTrue(parser.cursor.at_end())

    def test_last_failure_is_returned(self):
        parser = Parser('xyz')
        result = parser.any_of(lambda: parser.expect('a'), lambda: parser.expect('b'))
        self.assertFalse(result)
        self.assertEqual("Expected 'b'", result.reason)
        self.assertEqual(0, parser.cursor.offset)

    def test_no_alternatives(self):
        with self.assertRaises(ValueError):
            Parser('x').any_of()


class SequenceOfTest(TestCase):
    def test_collects_until_failure(self):
        parser = Parser('a a a b')
        result = parser.sequence_of(lambda: parser.expect('a'))
        self.assertEqual(Match(['a', 'a', 'a']), result)
        self.assertEqual(5, parser.cursor.offset)  # rolled back to before the whitespace preceding b

    def test_zero_repetitions(self):
        parser = Parser('b')
        self.assertEqual(Match([]), parser.sequence_of(lambda: parser.expect('a')))
        self.assertEqual(0, parser.cursor.offset)

    def test_empty_input(self):
        parser = Parser('')
        self.assertEqual(Match([]), parser.sequence_of(lambda: parser.expect('a')))

    def test_zero_width_match_stops(self):
        parser = Parser('abc')
        self.assertEqual(Match([None]), parser.sequence_of(lambda: Match(None)))
        self.assertEqual(0, parser.cursor.offset)

    def test_stops_at_scope_end(self):
        parser = Parser('(a a )')
        result = parser.scope_of('(', lambda: parser.sequence_of(lambda: parser.expect_pattern(WORD)), ')')
        self.assertEqual(Match(['a', 'a']), result)
        self.assertTrue(parser.cursor.at_end())


class ScopeOfTest(TestCase):
    def test_scope(self):
        parser = Parser('{{abc}}')
        self.assertEqual(Match('abc'), parser.scope_of('{{', lambda: parser.expect_pattern(WORD), '}}'))
        self.assertTrue(parser.cursor.at_end())

    def test_missing_close_rolls_back(self):
        parser = Parser('{{abc')
        result = parser.scope_of('{{', lambda: parser.expect_pattern(WORD), '}}')
        self.assertFalse(result)
        self.assertEqual("Expected '}}'", result.reason)
        self.assertEqual(5, result.position.offset)
        self.assertEqual(0, parser.cursor.offset)

    def test_inner_failure_rolls_back(self):
        parser = Parser('{{!}}')
        result = parser.scope_of('{{', lambda: parser.expect_pattern(WORD, 'a word'), '}}')
        self.assertEqual('Expected a word', result.reason)
        self.assertEqual(0, parser.cursor.offset)

    def test_missing_open(self):
        parser = Parser('abc}}')
        result = parser.scope_of('{{', lambda: parser.expect_pattern(WORD), '}}')
        self.assertEqual("Expected '{{'", result.reason)

    def test_max_depth(self):
        parser = Parser('((((x))))', max_depth=3)

        def nested():
            return parser.any_of(lambda: parser.scope_of('(', nested, ')'), lambda: parser.expect('x'))

        with self.assertRaisesRegex(NestingDepthError, 'Exceeded max nesting depth=3 at line 1, column 5'):
            nested()

    def test_within_max_depth(self):
        parser = Parser('(((x)))', max_depth=3)

        def nested():
            return parser.any_of(lambda: parser.scope_of('(', nested, ')'), lambda: parser.expect('x'))

        self.assertEqual(Match('x'), nested())
        self.assertTrue(parser.cursor.at_end())

    def test_invalid_max_depth(self):
        with self.assertRaises(ValueError):
            Parser('x', max_depth=0)


class ListOfTest(TestCase):
    def test_list(self):
        parser = Parser('a, b ,c;')
        self.assertEqual(Match(['a', 'b', 'c']), parser.list_of(',', lambda: parser.expect_pattern(WORD)))
        self.assertEqual(7, parser.cursor.offset)

    def test_single(self):
        parser = Parser('a;b')
        self.assertEqual(Match(['a']), parser.list_of(',', lambda: parser.expect_pattern(WORD)))

    def test_rule_failure_propagates(self):
        parser = Parser('a,;')
        result = parser.list_of(',', lambda: parser.expect_pattern(WORD, 'a word'))
        self.assertFalse(result)
        self.assertEqual('Expected a word', result.reason)
        self.assertEqual(0, parser.cursor.offset)

    def test_empty_scope(self):
        parser = Parser('[ ]')
        result = parser.scope_of('[', lambda: parser.list_of(',', lambda: parser.expect_pattern(WORD)), ']')
        self.assertEqual(Match([]), result)


class MaybeTest(TestCase):
    def test_present(self):
        parser = Parser('|a')
        self.assertEqual(Match('|'), parser.maybe(lambda: parser.expect('|')))
        self.assertEqual(1, parser.cursor.offset)

    def test_absent(self):
        parser = Parser(' a')
        self.assertEqual(Match(None), parser.maybe(lambda: parser.expect('|')))
        self.assertEqual(0, parser.cursor.offset)


class SubstringBeforeTest(TestCase):
    def test_before_literal(self):
        parser = Parser('abc{{def')
        self.assertEqual(Match('abc'), parser.substring_before('{{'))
        self.assertEqual(3, parser.cursor.offset)

    def test_no_delimiter_consumes_rest(self):
        parser = Parser(' abc ')
        self.assertEqual(Match(' abc '), parser.substring_before('{{'))
        self.assertTrue(parser.cursor.at_end())

    def test_immediate_delimiter(self):
        parser = Parser('{{abc')
        self.assertEqual(Match(''), parser.substring_before('{{'))
        self.assertEqual(0, parser.cursor.offset)

    def test_alternation(self):
        parser = Parser('ab|c}}d')
        self.assertEqual(Match('ab'), parser.substring_before('}}', '{{', '|'))
        parser.cursor.advance(1)
        self.assertEqual(Match('c'), parser.substring_before('}}', '{{', '|'))

    def test_compiled_pattern(self):
        parser = Parser('abc123')
        self.assertEqual(Match('abc'), parser.substring_before(regex.compile(r'\d')))

    def test_literals_are_escaped(self):
        parser = Parser('a.b*c')
        self.assertEqual(Match('a.b'), parser.substring_before('*'))

    def test_stops_at_scope_end(self):
        parser = Parser('<abc>def')
        self.assertEqual(Match('abc'), parser.scope_of('<', lambda: parser.substring_before('{{'), '>'))


class RunTest(TestCase):
    def test_must_consume_everything(self):
        parser = Parser('ab')
        with self.assertRaisesRegex(ParseError, 'Expected end of input at line 1, column 2'):
            parser.run(lambda: parser.expect('a'))

    def test_reports_furthest_failure(self):
        parser = Parser('(abc')

        def start():
            return parser.any_of(lambda: parser.scope_of('(', lambda: parser.expect_pattern(WORD), ')'), parser.fail)

        with self.assertRaises(ParseError) as ctx:
            parser.run(start)

        self.assertEqual("Expected ')'", ctx.exception.reason)
        self.assertEqual((1, 5, 4), (ctx.exception.line, ctx.exception.column, ctx.exception.offset))

    def test_success(self):
        parser = Parser('a')
        self.assertEqual('a', parser.run(lambda: parser.expect('a')))


class TraceTest(TestCase):
    def test_rule_decorator(self):
        class WordParser(Parser):
            @rule
            def word(self):
                return self.expect_pattern(WORD)

        recorder = TraceRecorder()
        parser = WordParser('one\n two', trace=True, tracer=recorder)
        parser.word()
        parser.word()
        self.assertEqual([('word', 1, 1, 'one'), ('word', 1, 4, 'one')], recorder.entries)

    def test_disabled(self):
        class WordParser(Parser):
            @rule
            def word(self):
                return self.expect_pattern(WORD)

        recorder = TraceRecorder()
        WordParser('one', tracer=recorder).word()
        self.assertEqual([], recorder.entries)


if __name__ == '__main__':
    main(exit=False, verbosity=2)
