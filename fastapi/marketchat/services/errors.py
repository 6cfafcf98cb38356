class MessagingError(Exception):
    """Base class for messaging errors callers can act on."""


class ReceiverNotFoundError(MessagingError):

    def __init__(self, receiver_id: str) -> None:
        super().__init__(f"Receiver not found: {receiver_id}")
        self.receiver_id = receiver_id


class ListingNotFoundError(MessagingError):

    def __init__(self, listing_id: str) -> None:
        super().__init__(f"Listing not found: {listing_id}")
        self.listing_id = listing_id


class ReadReceiptError(MessagingError):
    """Raised when someone other than the receiver tries to mark a message read."""
