"""Database infrastructure"""
from .connection import get_engine, get_session, get_session_maker, init_db, dispose_engine

__all__ = ["get_engine", "get_session", "get_session_maker", "init_db", "dispose_engine"]
