from drivehub.databases.mongodb import mongodb, MongoDB

__all__ = ["mongodb", "MongoDB"]
