"""Family structure models shared by every pedigree input format."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class AffectedStatus(str, Enum):
    AFFECTED = "affected"
    UNAFFECTED = "unaffected"
    UNKNOWN = "unknown"


class FamilyMember(BaseModel):
    """One individual of a pedigree.

    Attributes:
        id: Individual identifier, matching a sample name where sequenced
        family_id: Family identifier
        father_id: Father identifier (None when absent or unknown)
        mother_id: Mother identifier (None when absent or unknown)
        sex: Sex of the individual
        status: Affection status
    """

    model_config = ConfigDict(frozen=True)

    id: str
    family_id: str = ""
    father_id: str | None = None
    mother_id: str | None = None
    sex: Sex = Sex.UNKNOWN
    status: AffectedStatus = AffectedStatus.UNKNOWN

    @property
    def is_affected(self) -> bool:
        return self.status == AffectedStatus.AFFECTED

    @property
    def is_male(self) -> bool:
        return self.sex == Sex.MALE

    @property
    def is_female(self) -> bool:
        return self.sex == Sex.FEMALE


class Pedigree(BaseModel):
    """Immutable set of family members keyed by identifier.

    Family-level invariants (single family, affected proband) are enforced by
    the pedigree validator, not here, so that the validator can report them.
    """

    model_config = ConfigDict(frozen=True)

    members: tuple[FamilyMember, ...] = Field(default_factory=tuple)

    @field_validator("members")
    @classmethod
    def check_unique_ids(cls, v: tuple[FamilyMember, ...]) -> tuple[FamilyMember, ...]:
        """Reject pedigrees with repeated individual identifiers."""
        seen = set()
        duplicates = []
        for member in v:
            if member.id in seen:
                duplicates.append(member.id)
            seen.add(member.id)
        if duplicates:
            raise ValueError(f"Pedigree contains duplicate individual ids: {duplicates}")
        return v

    @classmethod
    def empty(cls) -> "Pedigree":
        return cls()

    @classmethod
    def just_proband(cls, proband_id: str, sex: Sex = Sex.UNKNOWN) -> "Pedigree":
        """Single-sample pedigree holding an affected proband."""
        return cls(
            members=(
                FamilyMember(
                    id=proband_id,
                    family_id="family",
                    sex=sex,
                    status=AffectedStatus.AFFECTED,
                ),
            )
        )

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def ids(self) -> list[str]:
        return [member.id for member in self.members]

    @property
    def family_ids(self) -> list[str]:
        """Distinct family identifiers in member order."""
        return list(dict.fromkeys(member.family_id for member in self.members))

    def contains(self, member_id: str) -> bool:
        return any(member.id == member_id for member in self.members)

    def get(self, member_id: str) -> FamilyMember | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def affected(self) -> list[FamilyMember]:
        return [member for member in self.members if member.is_affected]

    def unaffected(self) -> list[FamilyMember]:
        return [member for member in self.members if member.status == AffectedStatus.UNAFFECTED]

    def ancestors_of(self, member: FamilyMember) -> list[FamilyMember]:
        """Return every ancestor of ``member`` that is present in the pedigree.

        Parents referenced by id but missing from the pedigree are ignored.

        Args:
            member: Individual whose ancestry is walked

        Returns:
            Ancestors in breadth-first order, without repeats
        """
        ancestors: list[FamilyMember] = []
        seen: set[str] = set()
        queue = [member]
        while queue:
            current = queue.pop(0)
            for parent_id in (current.father_id, current.mother_id):
                if parent_id is None or parent_id in seen:
                    continue
                parent = self.get(parent_id)
                if parent is None:
                    continue
                seen.add(parent_id)
                ancestors.append(parent)
                queue.append(parent)
        return ancestors
