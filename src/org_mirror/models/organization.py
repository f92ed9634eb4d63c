"""Organization models."""

from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrganizationMappingError(ValueError):
    """Source and destination organization lists cannot be paired."""

    pass


class OrganizationPair(BaseModel):
    """A source organization mirrored into a destination organization."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description='Source organization login')
    destination: str = Field(..., description='Destination organization login')

    @field_validator('source', 'destination')
    @classmethod
    def validate_name(cls, v):
        """Validate organization name is not blank."""
        v = v.strip()
        if not v:
            raise ValueError('Organization name must not be empty')
        return v

    @classmethod
    def from_lists(
        cls, sources: Sequence[str], destinations: Sequence[str]
    ) -> List['OrganizationPair']:
        """Pair two positional organization lists.

        Args:
            sources: Source organization logins
            destinations: Destination organization logins, same order

        Returns:
            Organization pairs in input order

        Raises:
            OrganizationMappingError: If the lists are empty, differ in length
                or contain a blank entry
        """
        sources = [(s or '').strip() for s in sources]
        destinations = [(d or '').strip() for d in destinations]

        if not sources:
            raise OrganizationMappingError('No source organizations given')
        if len(sources) != len(destinations):
            raise OrganizationMappingError(
                f'Got {len(sources)} source organizations but '
                f'{len(destinations)} destination organizations; '
                'the lists are paired by position and must have the same length'
            )

        for index, (source, destination) in enumerate(zip(sources, destinations)):
            for role, name in (('source', source), ('destination', destination)):
                if not name:
                    raise OrganizationMappingError(
                        f'Blank {role} organization at position {index}'
                    )

        return [
            cls(source=source, destination=destination)
            for source, destination in zip(sources, destinations)
        ]

    def __str__(self) -> str:
        return f'{self.source} -> {self.destination}'
