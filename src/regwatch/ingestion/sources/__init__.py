"""Per-source adapters."""

from regwatch.ingestion.sources.banks import BANK_CONFIGS, BankNewsAdapter
from regwatch.ingestion.sources.bcbs import BCBSAdapter
from regwatch.ingestion.sources.boe import BoEAdapter, PRAAdapter
from regwatch.ingestion.sources.eu import EBAAdapter, ESMAAdapter
from regwatch.ingestion.sources.fatf import FATFAdapter
from regwatch.ingestion.sources.fca import (
    FCAAdapter,
    FCAConsultationPapersAdapter,
    FCADearCEOAdapter,
    FCADiscussionPapersAdapter,
)
from regwatch.ingestion.sources.ico import ICOAdapter
from regwatch.ingestion.sources.italy import BankOfItalyAdapter, ConsobAdapter
from regwatch.ingestion.sources.markets import AquisAdapter, LSEAdapter, PayUKAdapter
from regwatch.ingestion.sources.sebi import SEBIAdapter
from regwatch.ingestion.sources.spain import CNMVAdapter
from regwatch.ingestion.sources.uk import (
    FOSAdapter,
    FRCAdapter,
    JMLSGAdapter,
    OfcomAdapter,
    SFOAdapter,
    TPRAdapter,
)

__all__ = [
    "BANK_CONFIGS",
    "AquisAdapter",
    "BankNewsAdapter",
    "BankOfItalyAdapter",
    "BCBSAdapter",
    "BoEAdapter",
    "CNMVAdapter",
    "ConsobAdapter",
    "EBAAdapter",
    "ESMAAdapter",
    "FATFAdapter",
    "FCAAdapter",
    "FCAConsultationPapersAdapter",
    "FCADearCEOAdapter",
    "FCADiscussionPapersAdapter",
    "FOSAdapter",
    "FRCAdapter",
    "ICOAdapter",
    "JMLSGAdapter",
    "LSEAdapter",
    "OfcomAdapter",
    "PRAAdapter",
    "PayUKAdapter",
    "SEBIAdapter",
    "SFOAdapter",
    "TPRAdapter",
]
