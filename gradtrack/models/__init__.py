"""
GradTrack
SQLAlchemy instance shared by every model module.

Model modules:
    - auth: User
    - university: University, Requirement
    - task: Task
    - document: Document
    - deadline: Deadline
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
