from localwallet.parsers.card_document import (
    CorruptDocumentError,
    dump_collection,
    load_collection,
)
from localwallet.parsers.card_export import (
    ExportedCard,
    ImportedCard,
    export_cards,
    parse_import,
)

__all__ = [
    "CorruptDocumentError",
    "ExportedCard",
    "ImportedCard",
    "dump_collection",
    "export_cards",
    "load_collection",
    "parse_import",
]
