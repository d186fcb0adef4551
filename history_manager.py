"""
History Manager for TabCalc
Records and formats completed calculations
"""
import logging
import sqlite3

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, db):
        self.db = db

    def add_calculation(self, expression, result):
        """Add a calculation to history"""
        self.db.add_calculation(expression, result)

    def record(self, expression, result):
        """Calculator callback: store a calculation without disturbing the session"""
        try:
            self.add_calculation(expression, result)
        except sqlite3.Error:
            logger.warning("Could not record calculation %s = %s", expression, result, exc_info=True)

    def get_calculation_history(self, limit=50):
        """Get calculation history"""
        return self.db.get_calculations(limit)

    def clear_calculation_history(self):
        """Clear all calculation history"""
        self.db.clear_history()

    def format_calculation_history(self, limit=50):
        """Format calculation history for display"""
        return [
            f"{timestamp}: {expression} = {result}"
            for expression, result, timestamp in self.get_calculation_history(limit)
        ]
