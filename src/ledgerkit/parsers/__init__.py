"""Statement line classification and parsing."""

from ledgerkit.parsers.base import TransactionParser
from ledgerkit.parsers.chain import ParserChain, default_parsers
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.parsers.credit import CreditTransferParser
from ledgerkit.parsers.fee_split import FeeSplitParser
from ledgerkit.parsers.generic import DebitCreditLineParser
from ledgerkit.parsers.line_classifier import LineClassifier
from ledgerkit.parsers.service_fee import ServiceFeeParser
from ledgerkit.parsers.tabular import StandardBankTabularParser

__all__ = [
    "TransactionParser",
    "ParserChain",
    "default_parsers",
    "ParsingContext",
    "LineClassifier",
    "StandardBankTabularParser",
    "FeeSplitParser",
    "CreditTransferParser",
    "ServiceFeeParser",
    "DebitCreditLineParser",
]
