"""Authority registry and canonicalization of free-text regulator labels.

Every record has a short ``code`` that is its canonical label. Lookups are
case and whitespace insensitive over the code, the full name and the aliases,
so ``normalize_authority`` maps every known spelling to the code and maps the
code to itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorityRecord:
    """A regulator, exchange, standard setter or bank we ingest from."""

    code: str
    name: str
    region: str
    country: str
    aliases: tuple[str, ...] = ()


def _r(code: str, name: str, region: str, country: str, *aliases: str) -> AuthorityRecord:
    return AuthorityRecord(code=code, name=name, region=region, country=country, aliases=aliases)


AUTHORITY_REGISTRY: tuple[AuthorityRecord, ...] = (
    # UK
    _r("FCA", "Financial Conduct Authority", "UK", "UK"),
    _r("PRA", "Prudential Regulation Authority", "UK", "UK",
       "Prudential Regulation Authority (PRA)", "Bank of England PRA"),
    _r("BoE", "Bank of England", "UK", "UK", "Bank of England (BoE)", "BOE"),
    _r("ICO", "Information Commissioner's Office", "UK", "UK",
       "Information Commissioner Office", "Information Commissioners Office"),
    _r("FRC", "Financial Reporting Council", "UK", "UK"),
    _r("FOS", "Financial Ombudsman Service", "UK", "UK", "Financial Ombudsman"),
    _r("TPR", "The Pensions Regulator", "UK", "UK", "Pensions Regulator"),
    _r("SFO", "Serious Fraud Office", "UK", "UK"),
    _r("JMLSG", "Joint Money Laundering Steering Group", "UK", "UK"),
    _r("LSE", "London Stock Exchange", "UK", "UK", "London Stock Exchange Group", "LSEG"),
    _r("Aquis", "Aquis Exchange", "Europe", "UK", "Aquis Exchange PLC", "AQUIS"),
    _r("Pay.UK", "Pay.UK", "UK", "UK", "Pay UK", "PayUK", "PAYUK"),
    _r("PSR", "Payment Systems Regulator", "UK", "UK"),
    _r("CMA", "Competition and Markets Authority", "UK", "UK"),
    _r("OFCOM", "Office of Communications", "UK", "UK", "Ofcom"),
    _r("OFSI", "Office of Financial Sanctions Implementation", "UK", "UK"),
    _r("HMT", "HM Treasury", "UK", "UK", "HM Treasury, Office of Financial Sanctions Implementation"),
    _r("HMRC", "HM Revenue & Customs", "UK", "UK", "HM Revenue and Customs"),
    _r("FSCS", "Financial Services Compensation Scheme", "UK", "UK"),
    _r("NCA", "National Crime Agency", "UK", "UK"),
    _r("SRA", "Solicitors Regulation Authority", "UK", "UK"),
    _r("ASA", "Advertising Standards Authority", "UK", "UK"),
    _r("Gambling Commission", "Gambling Commission", "UK", "UK", "GAMBLING_COMMISSION"),
    # EU and member states
    _r("EBA", "European Banking Authority", "Europe", "EU", "EBA (European Banking Authority)"),
    _r("ESMA", "European Securities and Markets Authority", "Europe", "EU"),
    _r("EIOPA", "European Insurance and Occupational Pensions Authority", "Europe", "EU"),
    _r("ECB", "European Central Bank", "Europe", "EU"),
    _r("EC", "European Commission", "Europe", "EU"),
    _r("CONSOB", "Commissione Nazionale per le Societa e la Borsa", "Europe", "Italy"),
    _r("BdI", "Bank of Italy", "Europe", "Italy", "Banca d'Italia", "Banca d’Italia"),
    _r("CNMV", "Comision Nacional del Mercado de Valores", "Europe", "Spain",
       "Comisión Nacional del Mercado de Valores"),
    _r("BaFin", "Federal Financial Supervisory Authority", "Europe", "Germany", "BAFIN"),
    _r("AMF", "Autorite des Marches Financiers", "Europe", "France", "Autorité des marchés financiers"),
    _r("ACPR", "Autorite de Controle Prudentiel et de Resolution", "Europe", "France",
       "Autorite de Controle Prudentiel"),
    _r("AFM", "Authority for the Financial Markets", "Europe", "Netherlands"),
    _r("DNB", "De Nederlandsche Bank", "Europe", "Netherlands"),
    _r("CBI", "Central Bank of Ireland", "Europe", "Ireland"),
    _r("FINMA", "Swiss Financial Market Supervisory Authority", "Europe", "Switzerland"),
    # International standard setters
    _r("FATF", "Financial Action Task Force", "Global", "International", "FATF-GAFI", "GAFI"),
    _r("BCBS", "Basel Committee on Banking Supervision", "Global", "International"),
    _r("BIS", "Bank for International Settlements", "Global", "International"),
    _r("FSB", "Financial Stability Board", "Global", "International"),
    _r("IOSCO", "International Organization of Securities Commissions", "Global", "International"),
    # Asia-Pacific
    _r("SEBI", "Securities and Exchange Board of India", "Asia-Pacific", "India"),
    _r("RBI", "Reserve Bank of India", "Asia-Pacific", "India"),
    _r("MAS", "Monetary Authority of Singapore", "Asia-Pacific", "Singapore"),
    _r("HKMA", "Hong Kong Monetary Authority", "Asia-Pacific", "Hong Kong"),
    _r("SFC", "Securities and Futures Commission", "Asia-Pacific", "Hong Kong"),
    _r("ASIC", "Australian Securities and Investments Commission", "Asia-Pacific", "Australia"),
    _r("APRA", "Australian Prudential Regulation Authority", "Asia-Pacific", "Australia"),
    # Americas
    _r("SEC", "Securities and Exchange Commission", "Americas", "US"),
    _r("CFTC", "Commodity Futures Trading Commission", "Americas", "US"),
    _r("FINRA", "Financial Industry Regulatory Authority", "Americas", "US"),
    _r("Fed", "Federal Reserve System", "Americas", "US", "Federal Reserve", "FEDERAL_RESERVE"),
    _r("OCC", "Office of the Comptroller of the Currency", "Americas", "US"),
    # Middle East and Africa
    _r("DFSA", "Dubai Financial Services Authority", "Middle East", "UAE"),
    _r("ADGM", "Abu Dhabi Global Market", "Middle East", "UAE"),
    _r("SARB", "South African Reserve Bank", "Africa", "South Africa"),
    _r("FSCA", "Financial Sector Conduct Authority", "Africa", "South Africa"),
    # Banks
    _r("JPMorgan", "JPMorgan Chase", "Americas", "US", "JP Morgan", "J.P. Morgan"),
    _r("BofA", "Bank of America", "Americas", "US"),
    _r("Citigroup", "Citigroup", "Americas", "US", "Citi"),
    _r("WellsFargo", "Wells Fargo", "Americas", "US"),
    _r("Goldman", "Goldman Sachs", "Americas", "US"),
    _r("MorganStanley", "Morgan Stanley", "Americas", "US"),
    _r("HSBC", "HSBC", "UK", "UK", "HSBC Holdings"),
    _r("Barclays", "Barclays", "UK", "UK", "Barclays PLC"),
    _r("DeutscheBank", "Deutsche Bank", "Europe", "Germany"),
    _r("UBS", "UBS", "Europe", "Switzerland"),
    _r("Lloyds", "Lloyds Banking Group", "UK", "UK", "Lloyds Bank"),
    _r("NatWest", "NatWest Group", "UK", "UK"),
    _r("SantanderUK", "Santander UK", "UK", "UK"),
    _r("Nationwide", "Nationwide Building Society", "UK", "UK"),
    _r("TSB", "TSB", "UK", "UK", "TSB Bank"),
    _r("Monzo", "Monzo", "UK", "UK", "Monzo Bank"),
    _r("Starling", "Starling Bank", "UK", "UK"),
    _r("Revolut", "Revolut", "Europe", "UK"),
    _r("MetroBank", "Metro Bank", "UK", "UK"),
    _r("VirginMoney", "Virgin Money", "UK", "UK"),
)

# Freeform labels found in older data and on source pages that the
# registry does not know about.
LEGACY_ALIASES: dict[str, str] = {
    "Bank of England": "BoE",
    "Prudential Regulation Authority (PRA)": "PRA",
    "Bank of England Prudential Regulation Authority": "PRA",
    "PRA (Bank of England)": "PRA",
    "Financial Conduct Authority (FCA)": "FCA",
    "The Financial Conduct Authority": "FCA",
    "European Banking Authority": "EBA",
    "European Securities and Markets Authority (ESMA)": "ESMA",
    "Financial Action Task Force (FATF)": "FATF",
    "Serious Fraud Office (SFO)": "SFO",
    "The Pensions Regulator (TPR)": "TPR",
    "Information Commissioner's Office (ICO)": "ICO",
    "Financial Ombudsman Service (FOS)": "FOS",
    "Financial Reporting Council (FRC)": "FRC",
    "JMLSG Guidance": "JMLSG",
    "London Stock Exchange (LSE)": "LSE",
    "Aquis Stock Exchange": "Aquis",
    "Pay.UK Ltd": "Pay.UK",
    "Securities and Exchange Board of India (SEBI)": "SEBI",
    "CONSOB Italy": "CONSOB",
    "Banca d'Italia (Bank of Italy)": "BdI",
    "CNMV Spain": "CNMV",
}

_WHITESPACE_RE = re.compile(r"\s+")


def _key(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip().lower()


def _build_index(records) -> dict[str, AuthorityRecord]:
    index: dict[str, AuthorityRecord] = {}
    # Codes win over names, names win over aliases.
    for record in records:
        index.setdefault(_key(record.code), record)
    for record in records:
        index.setdefault(_key(record.name), record)
    for record in records:
        for alias in record.aliases:
            index.setdefault(_key(alias), record)
    return index


_INDEX = _build_index(AUTHORITY_REGISTRY)
_LEGACY_INDEX = {_key(label): code for label, code in LEGACY_ALIASES.items()}


def resolve_authority(label: str | None) -> AuthorityRecord | None:
    """Look up a registry record by code, name or alias."""
    if not label:
        return None
    return _INDEX.get(_key(label))


def normalize_authority(label: str | None) -> str:
    """Map a raw regulator label to its canonical code.

    Registry first, then the legacy alias map, otherwise the input
    (stripped) is returned unchanged.
    """
    if not label:
        return ""
    record = resolve_authority(label)
    if record is not None:
        return record.code
    legacy = _LEGACY_INDEX.get(_key(label))
    if legacy is not None:
        return legacy
    return label.strip()


def authority_display_name(label: str | None) -> str:
    """Label of the form ``FCA - Financial Conduct Authority`` for reports."""
    record = resolve_authority(normalize_authority(label))
    if record is None:
        return (label or "").strip()
    if record.code == record.name:
        return record.code
    return f"{record.code} - {record.name}"


def authority_tags(label: str | None) -> tuple[str | None, str | None]:
    """Return ``(country, region)`` for a label, or ``(None, None)``."""
    record = resolve_authority(normalize_authority(label))
    if record is None:
        return None, None
    return record.country, record.region
