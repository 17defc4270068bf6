from enum import Enum


class HourAvail(str, Enum):
    open = "OPEN"
    closed = "CLOSED"


class SessionStatus(str, Enum):
    upcoming = "Upcoming"
    ongoing = "Ongoing"
    finished = "Finished"
