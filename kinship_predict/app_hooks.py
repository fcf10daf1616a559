from typing import Optional, Protocol


class AppHooks(Protocol):
    """
    Protocol for application hooks supplied by the caller of a prediction scan.

    A background job or an admin-triggered request implements these to follow
    progress and to abort a long scan over a large tree.

    Methods:
        report_step(...): Progress messages from the scan.
        stop_requested() -> bool: Whether the caller wants the scan aborted.
    """
    def report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 1) -> None:
        """
        Report progress messages from the prediction scan.

        Args:
            info (str): Progress message.
            target (int): Target count for progress.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Incremental step count.
        """
        pass

    def stop_requested(self) -> bool:
        """
        Check if a stop has been requested by the caller.

        Returns:
            bool: True if stop is requested, False otherwise.
        """
        return False
