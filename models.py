from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

DOCUMENT_SLUG = 'portfolio'


class PortfolioDocument(db.Model):
    """Portfolio document model - the whole portfolio stored as one JSON row"""
    __tablename__ = 'portfolio_documents'

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(100), unique=True, nullable=False, default=DOCUMENT_SLUG)
    content = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<PortfolioDocument {self.slug}>'
