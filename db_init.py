"""Database initialization helpers for the database storage backend"""
from flask import Flask
from models import db, PortfolioDocument, DOCUMENT_SLUG
from seed_data import default_document


def init_db(app: Flask):
    """Initialize database with app context"""
    db.init_app(app)

    with app.app_context():
        # Create all tables
        db.create_all()
        app.logger.info("Database tables created successfully")

        # Check if the portfolio document exists
        if get_portfolio_document() is None:
            document = PortfolioDocument(slug=DOCUMENT_SLUG, content=default_document())
            db.session.add(document)
            db.session.commit()
            app.logger.info("Portfolio document seeded successfully")
        else:
            app.logger.info("Portfolio document already exists")


def get_portfolio_document(slug=DOCUMENT_SLUG):
    """Get the stored portfolio document row by slug"""
    return PortfolioDocument.query.filter_by(slug=slug).first()
