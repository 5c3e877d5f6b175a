"""Database layer for the user's book library."""
import asyncio
import psycopg2
from psycopg2 import pool
from typing import List
import logging

from booksearch.errors import DatastoreUnavailable
from booksearch.models import LocalRecord, MAX_RESULTS

logger = logging.getLogger(__name__)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Database:
    """PostgreSQL database with connection pooling."""
    
    def __init__(self, connection_string: str, min_conn: int = 1, max_conn: int = 10):
        """
        Initialize database connection pool.
        
        Args:
            connection_string: PostgreSQL connection string
            min_conn: Minimum connections in pool
            max_conn: Maximum connections in pool
        """
        self.connection_pool = psycopg2.pool.ThreadedConnectionPool(
            min_conn,
            max_conn,
            connection_string
        )
        logger.info("Database connection pool created successfully")
    
    def init_schema(self):
        """Create the books table if it doesn't exist."""
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS books (
                        id SERIAL PRIMARY KEY,
                        title TEXT NOT NULL,
                        author TEXT NOT NULL,
                        pages INTEGER NOT NULL,
                        cover_url TEXT NOT NULL,
                        added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
                    )
                """)
                
                cur.execute("""
                    CREATE INDEX IF NOT EXISTS idx_books_added
                    ON books (added_at DESC)
                """)
                
                conn.commit()
                logger.info("Database schema initialized successfully")
        
        finally:
            self.connection_pool.putconn(conn)
    
    def search_books(self, query: str, limit: int = MAX_RESULTS) -> List[LocalRecord]:
        """
        Find library books whose title or author contains the query.
        
        Args:
            query: Substring to match, case-insensitive
            limit: Maximum results
        
        Returns:
            List of LocalRecord objects, most recently added first
        """
        pattern = f"%{escape_like(query)}%"
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT id, title, author, pages, cover_url
                    FROM books
                    WHERE title ILIKE %s OR author ILIKE %s
                    ORDER BY added_at DESC, id
                    LIMIT %s
                """, (pattern, pattern, limit))
                
                return [LocalRecord(*row) for row in cur.fetchall()]
        finally:
            self.connection_pool.putconn(conn)
    
    def close(self):
        """Close all connections in the pool."""
        if self.connection_pool:
            self.connection_pool.closeall()
            logger.info("Database connection pool closed")
    
    def __enter__(self):
        """Context manager entry."""
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class LocalInventoryClient:
    """Async adapter over a blocking library datastore."""
    
    def __init__(self, database):
        """
        Args:
            database: Anything with a ``search_books(query)`` method
        """
        self.database = database
    
    async def search(self, text: str) -> List[LocalRecord]:
        """
        Search the library without blocking the event loop.
        
        Raises:
            DatastoreUnavailable: If the datastore query fails
        """
        try:
            return await asyncio.to_thread(self.database.search_books, text)
        except psycopg2.Error as e:
            raise DatastoreUnavailable(f"Library search failed: {e}") from e
