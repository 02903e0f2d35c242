from flask_sqlalchemy import SQLAlchemy

# Shared database instance
db = SQLAlchemy()
