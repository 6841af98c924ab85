"""Ordered parser chain."""

from typing import Iterable, Optional, Sequence, Union

import structlog

from ledgerkit.domain.entities import RawFieldBag, RawLine, UnparsedLine
from ledgerkit.domain.errors import ParseError
from ledgerkit.parsers.base import TransactionParser
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.parsers.credit import CreditTransferParser
from ledgerkit.parsers.fee_split import FeeSplitParser
from ledgerkit.parsers.generic import DebitCreditLineParser
from ledgerkit.parsers.service_fee import ServiceFeeParser
from ledgerkit.parsers.tabular import StandardBankTabularParser

logger = structlog.get_logger(__name__)

ChainOutput = Union[RawFieldBag, UnparsedLine]


def default_parsers() -> list[TransactionParser]:
    """Parsers in priority order, most specific first."""
    return [
        StandardBankTabularParser(),
        FeeSplitParser(),
        CreditTransferParser(),
        ServiceFeeParser(),
        DebitCreditLineParser(),
    ]


class ParserChain:
    """Feeds lines to the first parser that accepts them.

    Records from multiline parsers are held on the context until the next
    record starts or the statement ends, so continuation lines can still
    extend them. Output preserves statement order.
    """

    def __init__(self, parsers: Optional[Sequence[TransactionParser]] = None):
        self.parsers = list(parsers) if parsers is not None else default_parsers()

    def feed(self, line: RawLine, context: ParsingContext) -> list[ChainOutput]:
        """Parse a classified transaction line.

        Returns:
            Completed field bags and unparsed lines, in statement order
        """
        parser = self._select(line, context)
        if parser is None:
            if self._continue(line, context):
                return []
            logger.warning("Unparsed transaction line", line_number=line.line_number, text=line.text)
            return self._flush(context) + [UnparsedLine(text=line.text, line_number=line.line_number)]

        try:
            bags = parser.parse(line, context)
        except ParseError as e:
            logger.warning(
                "Parser rejected line",
                parser=parser.name,
                line_number=line.line_number,
                error=str(e),
            )
            return self._flush(context) + [
                UnparsedLine(text=line.text, line_number=line.line_number, reason=str(e))
            ]

        if not bags:
            logger.debug("Continuation line absorbed", parser=parser.name, line_number=line.line_number)
            return []

        logger.debug("Line parsed", parser=parser.name, line_number=line.line_number, records=len(bags))
        output: list[ChainOutput] = self._flush(context)
        if parser.multiline:
            output.extend(bags[:-1])
            context.pending = bags[-1]
            context.continuation_open = True
        else:
            output.extend(bags)
        return output

    def offer_continuation(self, line: RawLine, context: ParsingContext) -> bool:
        """Offer a non-transaction line as a description continuation.

        Returns:
            True if the pending record absorbed the line
        """
        if self._continue(line, context):
            return True
        context.continuation_open = False
        return False

    def finish(self, context: ParsingContext) -> list[RawFieldBag]:
        """Emit the pending record at the end of the statement."""
        return self._flush(context)

    def parse_lines(self, lines: Iterable[RawLine], context: ParsingContext) -> list[ChainOutput]:
        """Feed every line and flush; used where no classifier is involved."""
        output: list[ChainOutput] = []
        for line in lines:
            output.extend(self.feed(line, context))
        output.extend(self.finish(context))
        return output

    def _select(self, line: RawLine, context: ParsingContext) -> Optional[TransactionParser]:
        for parser in self.parsers:
            if parser.can_parse(line, context):
                return parser
        return None

    def _continue(self, line: RawLine, context: ParsingContext) -> bool:
        for parser in self.parsers:
            if parser.is_continuation(line, context):
                context.pending.append_description(line.text)
                logger.debug("Continuation line absorbed", parser=parser.name, line_number=line.line_number)
                return True
        return False

    @staticmethod
    def _flush(context: ParsingContext) -> list[ChainOutput]:
        pending = context.take_pending()
        return [pending] if pending is not None else []
