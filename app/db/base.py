from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models register themselves on Base.metadata when app.db.models is imported
