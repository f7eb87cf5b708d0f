from .db_manager import db, AnalysisCacheEntry, initialize_database

__all__ = ["db", "AnalysisCacheEntry", "initialize_database"]
