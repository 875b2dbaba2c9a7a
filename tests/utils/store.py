from clubhouse.store import SqlDocumentStore


class RacingStore(SqlDocumentStore):
    """
    Runs `race` once, after the first attempt of the next transaction has
    done its reads, to simulate a competing commit.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.race = None
        self.attempts = 0

    def transaction(self, callback):
        def racing(tx):
            self.attempts += 1
            result = callback(tx)
            if self.race is not None:
                race, self.race = self.race, None
                race()
            return result

        return super().transaction(racing)
