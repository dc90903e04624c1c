from venuescrape.storage.writers import SaveResult, clean_events, output_path, save_events

__all__ = ["SaveResult", "clean_events", "output_path", "save_events"]
