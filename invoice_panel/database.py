"""Database configuration and initialization.

Business data lives in the remote backend; the local database only stores
panel settings.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()

# Global session and engine
engine = None
db_session = None


def init_db(app):
    """Initialize database connection and create missing tables."""
    global engine, db_session

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine_kwargs = {'echo': app.config.get('SQLALCHEMY_ECHO', False)}
    if database_uri.startswith('sqlite'):
        # One shared connection so an in-memory database survives across sessions
        engine_kwargs['connect_args'] = {'check_same_thread': False}
        if ':memory:' in database_uri:
            engine_kwargs['poolclass'] = StaticPool
    else:
        engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

    engine = create_engine(database_uri, **engine_kwargs)

    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    Base.query = db_session.query_property()

    from invoice_panel import models  # noqa: F401  (registers tables)
    Base.metadata.create_all(bind=engine)

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def get_session():
    """Get database session."""
    return db_session
