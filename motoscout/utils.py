"""
Utility functions for text processing, price parsing, and logging.
"""
import logging
import re
from typing import Optional, Tuple


def init_logger(
    name: str = "motoscout",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "motoscout.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def clean_text(s: Optional[str]) -> str:
    """Clean and normalize text by removing extra whitespace."""
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def _parse_number(digits: str) -> Optional[float]:
    """
    Turn a European or English formatted number into a float.

    "5.500" -> 5500, "5.500,50" -> 5500.5, "5,500.50" -> 5500.5, "12,5" -> 12.5
    """
    if "." in digits and "," in digits:
        # The right-most separator is the decimal one
        if digits.rfind(",") > digits.rfind("."):
            digits = digits.replace(".", "").replace(",", ".")
        else:
            digits = digits.replace(",", "")
    elif "," in digits:
        if re.fullmatch(r"\d{1,3}(,\d{3})+", digits):
            digits = digits.replace(",", "")
        else:
            digits = digits.replace(",", ".")
    elif "." in digits:
        if re.fullmatch(r"\d{1,3}(\.\d{3})+", digits):
            digits = digits.replace(".", "")
    try:
        return float(digits)
    except ValueError:
        return None


def parse_price(price_text: str) -> Tuple[Optional[float], Optional[str]]:
    """
    Parse price text to extract numeric value and currency.

    Supports symbol-before and symbol-after forms in EUR €, USD $ and GBP £.
    """
    if not price_text:
        return (None, None)

    s = price_text.replace("\xa0", " ")
    m = re.search(r"\d[\d.,]*", s)
    val = _parse_number(m.group(0).rstrip(".,")) if m else None

    cur = None
    m2 = re.search(r"(€|\$|£)", s)
    if m2:
        cur = m2.group(1)
    else:
        m3 = re.search(r"\b(EUR|USD|GBP)\b", s, re.I)
        if m3:
            cur = m3.group(1).upper()

    symbol_map = {"€": "EUR", "$": "USD", "£": "GBP"}
    if cur in symbol_map:
        cur = symbol_map[cur]

    return (val, cur)


def parse_mileage_km(text: Optional[str]) -> Optional[int]:
    """
    Extract the kilometre count from a mileage snippet.

    Handles "12.000 km", "km 12.000", "12,000km".
    """
    if not text:
        return None
    m = re.search(r"\d[\d.,]*", text)
    if not m:
        return None
    num = re.sub(r"[.,]", "", m.group(0))
    try:
        return int(num)
    except ValueError:
        return None
