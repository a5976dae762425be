"""Per-sample genotype calls."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class AlleleCall(str, Enum):
    REF = "ref"
    ALT = "alt"
    OTHER_ALT = "other_alt"
    NO_CALL = "no_call"


# VCF-style allele tokens for a bi-allelic record split out of a multi-allelic site
_TOKEN_CALLS = {
    "0": AlleleCall.REF,
    "1": AlleleCall.ALT,
    ".": AlleleCall.NO_CALL,
}


class GenotypeCall(BaseModel):
    """Allele calls of one sample at one variant.

    Attributes:
        calls: Allele calls, one per chromosome copy (0..N)
        phased: Whether the calls are phased (haplotype order is meaningful)
    """

    model_config = ConfigDict(frozen=True)

    calls: tuple[AlleleCall, ...] = ()
    phased: bool = False

    @classmethod
    def parse(cls, text: str) -> "GenotypeCall":
        """Parse a VCF-style genotype string such as ``0/1``, ``1|0`` or ``./.``.

        Any allele index other than 0 or 1 is an alternate allele belonging to
        another variant at the same site and is read as ``OTHER_ALT``.
        """
        text = text.strip()
        if not text:
            return cls()
        phased = "|" in text
        tokens = text.replace("|", "/").split("/")
        calls = tuple(_TOKEN_CALLS.get(token, AlleleCall.OTHER_ALT) for token in tokens)
        return cls(calls=calls, phased=phased)

    @property
    def is_no_call(self) -> bool:
        return all(call == AlleleCall.NO_CALL for call in self.calls)

    @property
    def is_hom_ref(self) -> bool:
        return bool(self.calls) and all(call == AlleleCall.REF for call in self.calls)

    @property
    def is_hom_alt(self) -> bool:
        return bool(self.calls) and all(call == AlleleCall.ALT for call in self.calls)

    @property
    def is_het(self) -> bool:
        return AlleleCall.ALT in self.calls and any(
            call in (AlleleCall.REF, AlleleCall.OTHER_ALT) for call in self.calls
        )

    @property
    def is_phased_het(self) -> bool:
        return self.phased and self.is_het

    @property
    def carries_alt(self) -> bool:
        return self.is_het or self.is_hom_alt

    @property
    def alt_phase(self) -> int | None:
        """Haplotype index carrying the alternate allele of a phased call."""
        if not self.phased or AlleleCall.ALT not in self.calls:
            return None
        return self.calls.index(AlleleCall.ALT)

    def __str__(self) -> str:
        tokens = {
            AlleleCall.REF: "0",
            AlleleCall.ALT: "1",
            AlleleCall.OTHER_ALT: "2",
            AlleleCall.NO_CALL: ".",
        }
        return ("|" if self.phased else "/").join(tokens[call] for call in self.calls)
