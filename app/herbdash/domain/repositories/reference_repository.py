from abc import ABC, abstractmethod
from herbdash.domain.models.reference import ReferenceData


class ReferenceRepository(ABC):
    """
    Abstract repository interface for the labelled reference set.
    Follows the repository pattern for decoupling domain and infrastructure.

    Implementations must raise ReferenceDataException when the underlying
    data is missing or malformed.
    """

    @abstractmethod
    def load(self) -> ReferenceData:
        """
        Load and validate the reference set.

        Returns:
            The ReferenceData, identical on every call

        Raises:
            ReferenceDataException: If the reference data is missing or malformed
        """
        pass
