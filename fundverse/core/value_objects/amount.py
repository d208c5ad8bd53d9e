"""
Objets valeur pour les montants ICP.

Les canisters manipulent exclusivement des entiers en e8s (plus petite
unité, 10^8 e8s = 1 ICP). L'interface utilisateur saisit des montants
décimaux en ICP : la conversion se fait en arithmétique décimale exacte
pour éviter les erreurs d'arrondi des flottants.
"""

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Union

from fundverse.core.errors import InvalidAmountError

E8S_PER_ICP = 100_000_000
MAX_U64 = 2**64 - 1

AmountInput = Union[Decimal, str, int, float]


def _to_decimal(amount: AmountInput) -> Decimal:
    """Convertit une saisie utilisateur en Decimal (les floats via leur repr)."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    return value


def to_e8s(amount: AmountInput) -> int:
    """
    Convertit un montant en ICP vers des e8s : floor(amount * 10^8).

    Args:
        amount: Montant decimal en ICP (Decimal, str, int ou float)

    Returns:
        Montant entier en e8s, strictement positif et representable en u64

    Raises:
        InvalidAmountError: Si le montant n'est pas fini, est nul/negatif
            apres conversion, ou depasse u64
    """
    value = _to_decimal(amount)
    e8s = int((value * E8S_PER_ICP).to_integral_value(rounding=ROUND_FLOOR))
    if e8s <= 0:
        raise InvalidAmountError("Amount must be greater than 0")
    if e8s > MAX_U64:
        raise InvalidAmountError("Amount exceeds the maximum representable value")
    return e8s


def from_e8s(e8s: int) -> Decimal:
    """Convertit des e8s en ICP (exact)."""
    return Decimal(e8s) / E8S_PER_ICP


def format_e8s(e8s: int) -> str:
    """Formate des e8s en ICP avec 8 decimales (ex: 150000000 -> '1.50000000')."""
    return f"{from_e8s(e8s):.8f}"


def format_icp(amount: AmountInput) -> str:
    """Formate un montant en ICP pour l'affichage (ex: '1.50000000 ICP')."""
    return f"{_to_decimal(amount):.8f} ICP"
