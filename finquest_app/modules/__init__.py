"""Feature modules of the FinQuest app."""
