from newsdesk.pubsub.publisher import ALL_CARDS_CHANNEL, CardPublisher, channels_for

__all__ = ["ALL_CARDS_CHANNEL", "CardPublisher", "channels_for"]
