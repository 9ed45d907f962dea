"""ClubTable - booking gateway for the club's dining reservations"""

__version__ = "1.0.0"
