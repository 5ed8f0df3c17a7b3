from datetime import date

from rentquote.core.enums import EquipmentDomain


def format_quote_number(sequence: int, issued_on: date, domain: EquipmentDomain = EquipmentDomain.GENERAL) -> str:
    """Build a quote number such as ``07/08.2025`` or ``PUB/007/08.2025``.

    ``sequence`` is the 1-based count of quotes issued so far, supplied by
    the persistence layer.
    """
    if sequence < 1:
        raise ValueError("Quote sequence must start at 1")
    period = f"{issued_on.month:02d}.{issued_on.year}"
    if EquipmentDomain(domain) == EquipmentDomain.PUBLIC:
        return f"PUB/{sequence:03d}/{period}"
    return f"{sequence:02d}/{period}"
