"""Accounts database models."""

from sqlalchemy import Column, Integer, SmallInteger, String, text
from flask_sqlalchemy import SQLAlchemy

from ...domain import now

db: SQLAlchemy = SQLAlchemy()


class DBAccount(db.Model):
    """
    A registered account.

        +---------------+--------------+------+-----+---------+----------------+
        | Field         | Type         | Null | Key | Default | Extra          |
        +---------------+--------------+------+-----+---------+----------------+
        | account_id    | int(11)      | NO   | PRI | NULL    | auto_increment |
        | username      | varchar(50)  | NO   | UNI | NULL    |                |
        | email         | varchar(100) | NO   | UNI | NULL    |                |
        | password_hash | varchar(255) | NO   |     | NULL    |                |
        | nickname      | varchar(50)  | NO   |     | ''      |                |
        | gender        | tinyint      | NO   |     | 0       |                |
        | avatar        | varchar(255) | NO   |     | ''      |                |
        | status        | tinyint      | NO   | MUL | 1       |                |
        | created_at    | int(11)      | NO   |     | 0       |                |
        | updated_at    | int(11)      | NO   |     | 0       |                |
        +---------------+--------------+------+-----+---------+----------------+
    """

    __tablename__ = 'accounts'

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    nickname = Column(String(50), nullable=False, server_default=text("''"))
    gender = Column(SmallInteger, nullable=False, server_default=text("'0'"))
    avatar = Column(String(255), nullable=False, server_default=text("''"))
    status = Column(SmallInteger, nullable=False, index=True,
                    server_default=text("'1'"))
    created_at = Column(Integer, nullable=False, default=now)
    """Epoch seconds."""
    updated_at = Column(Integer, nullable=False, default=now, onupdate=now)
    """Epoch seconds."""
