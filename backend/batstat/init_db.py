from batstat.database.database import engine, Base
from batstat.database.models import Player, Game, GameLineup, StatRecord  # noqa: F401

def init_db():
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")

if __name__ == "__main__":
    init_db()
