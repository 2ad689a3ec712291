"""Ingestion pipeline — source adapters, fetch strategies and normalization."""

from functools import partial

from regwatch.ingestion.registry import register_adapter
from regwatch.ingestion.sources import (
    BANK_CONFIGS,
    AquisAdapter,
    BankNewsAdapter,
    BankOfItalyAdapter,
    BCBSAdapter,
    BoEAdapter,
    CNMVAdapter,
    ConsobAdapter,
    EBAAdapter,
    ESMAAdapter,
    FATFAdapter,
    FCAAdapter,
    FCAConsultationPapersAdapter,
    FCADearCEOAdapter,
    FCADiscussionPapersAdapter,
    FOSAdapter,
    FRCAdapter,
    ICOAdapter,
    JMLSGAdapter,
    LSEAdapter,
    OfcomAdapter,
    PayUKAdapter,
    PRAAdapter,
    SEBIAdapter,
    SFOAdapter,
    TPRAdapter,
)

register_adapter("fca", FCAAdapter)
register_adapter("fca_cp", FCAConsultationPapersAdapter)
register_adapter("fca_dp", FCADiscussionPapersAdapter)
register_adapter("fca_dear_ceo", FCADearCEOAdapter)
register_adapter("boe", BoEAdapter)
register_adapter("pra", PRAAdapter)
register_adapter("eba", EBAAdapter)
register_adapter("esma", ESMAAdapter)
register_adapter("fatf", FATFAdapter)
register_adapter("bcbs", BCBSAdapter)
register_adapter("ico", ICOAdapter)
register_adapter("frc", FRCAdapter)
register_adapter("fos", FOSAdapter)
register_adapter("tpr", TPRAdapter)
register_adapter("sfo", SFOAdapter)
register_adapter("ofcom", OfcomAdapter)
register_adapter("jmlsg", JMLSGAdapter)
register_adapter("consob", ConsobAdapter)
register_adapter("bank_of_italy", BankOfItalyAdapter)
register_adapter("cnmv", CNMVAdapter)
register_adapter("sebi", SEBIAdapter)
register_adapter("lse", LSEAdapter)
register_adapter("aquis", AquisAdapter)
register_adapter("payuk", PayUKAdapter)

for _bank_key in BANK_CONFIGS:
    register_adapter(f"bank:{_bank_key.lower()}", partial(BankNewsAdapter, _bank_key))
