import uuid


class Taxi:
    def __init__(self):
        self.id = uuid.uuid4()
        self.is_occupied = False

    def occupy(self):
        self.is_occupied = True

    def release(self):
        self.is_occupied = False

    def __repr__(self):
        return f"Taxi(id={self.id}, occupied={self.is_occupied})"
