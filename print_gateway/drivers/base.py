from abc import ABC, abstractmethod

from ..jobs import Job, PrintMode, ResolvedPayload


class Driver(ABC):
    """One transport that can put a payload on a printer."""

    mode: PrintMode

    @abstractmethod
    def deliver(self, job: Job, payload: ResolvedPayload) -> None:
        """Deliver the payload to the job's destination.

        Returns once the transport reports completion; raises a DeliveryError
        subclass on failure.
        """

    @property
    def success_message(self) -> str:
        return "Delivered"
