from __future__ import annotations

import random

FIRST_NAMES = [
    "James", "Oliver", "Harry", "Jack", "Charlie", "Thomas", "George", "Oscar",
    "William", "Henry", "Lucas", "Daniel", "Alexander", "Mason", "Ethan",
    "Marco", "Luca", "Giovanni", "Alessandro", "Andrea", "Matteo", "Lorenzo",
    "Pablo", "Carlos", "Miguel", "Alejandro", "Diego", "Sergio", "Luis", "Fernando",
    "Pierre", "Antoine", "Hugo", "Paul", "Adrien", "Theo", "Leon", "Kai",
    "Joshua", "Florian", "Jamal", "Niklas", "Timo", "Bruno", "Diogo", "Bernardo",
    "Ruben", "Joao", "Rafael", "Goncalo", "Pedro", "Robin", "Matthijs", "Ryan",
    "Cody", "Daley", "Jens", "Magnus", "Sven", "Emil", "Nils", "Anders",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Wilson", "Taylor", "Davies",
    "Evans", "Walker", "Roberts", "Clark", "Wright", "Hall", "Young",
    "Rossi", "Ferrari", "Bianchi", "Romano", "Colombo", "Ricci", "Marino",
    "Garcia", "Rodriguez", "Martinez", "Lopez", "Hernandez", "Gonzalez", "Perez",
    "Dupont", "Martin", "Bernard", "Dubois", "Robert", "Richard", "Mueller",
    "Schmidt", "Schneider", "Fischer", "Weber", "Wagner", "Becker", "Silva",
    "Santos", "Ferreira", "Oliveira", "Costa", "Rodrigues", "Almeida", "De Jong",
    "Van Dijk", "Bakker", "Visser", "Smit", "Meijer", "Larsen", "Nielsen",
    "Hansen", "Berg", "Lindqvist", "Holm", "Dahl",
]

CLUB_TOWNS = [
    "Ashford", "Bramley", "Castleton", "Dunmore", "Eastvale", "Fairhaven", "Glenbrook", "Harrowgate",
    "Ironbridge", "Kingsport", "Lakeside", "Marlow", "Northwick", "Oakridge", "Portsea", "Queensbury",
    "Redcliff", "Stonebridge", "Thornbury", "Upperton", "Westmarsh", "Yarrow", "Alderney", "Blackwater",
    "Coldharbour", "Deepdale", "Elmstead", "Foxhollow", "Greystone", "Highcliffe", "Ivybridge", "Juniper",
    "Kestrel Bay", "Longford", "Millbrook", "Newhaven", "Old Mill", "Pinehurst", "Riverton", "Saltmarsh",
    "Southgate", "Tidewater", "Valemont", "Whitby Cross", "Wolfsden", "Amberley", "Brightwater", "Corrin",
    "Dovecote", "Eagleton", "Fernleigh", "Goldcrest", "Hollowmere", "Kelby", "Larkfield", "Moorside",
]

CLUB_SUFFIXES = ["United", "City", "Athletic", "Rovers", "Town", "Albion", "Wanderers", "FC", "Sporting", "Rangers"]


class NameGenerator:
    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._used: set[tuple[str, str]] = set()
        self._pool = [(first, last) for first in FIRST_NAMES for last in LAST_NAMES]
        self._rng.shuffle(self._pool)
        self._idx = 0

    def reserve(self, names: list[tuple[str, str]]) -> None:
        self._used.update(names)

    def next_name(self) -> tuple[str, str]:
        """Unique (first, last) pair; once the pool runs dry, surnames get a numeric suffix."""
        while self._idx < len(self._pool):
            name = self._pool[self._idx]
            self._idx += 1
            if name not in self._used:
                self._used.add(name)
                return name

        suffix = 1
        while True:
            first, last = self._pool[self._rng.randrange(0, len(self._pool))]
            candidate = (first, f"{last} {suffix}")
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate
            suffix += 1

    def club_names(self, count: int) -> list[str]:
        towns = list(CLUB_TOWNS)
        self._rng.shuffle(towns)
        if count > len(towns):
            raise ValueError(f"Only {len(towns)} club towns available, {count} requested")
        return [f"{town} {self._rng.choice(CLUB_SUFFIXES)}" for town in towns[:count]]
