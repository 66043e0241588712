"""Default backlog refill candidates: public-domain classics as plain text."""

DEFAULT_CANDIDATES = [
    "https://www.gutenberg.org/cache/epub/2701/pg2701.txt",  # Moby Dick
    "https://www.gutenberg.org/cache/epub/1342/pg1342.txt",  # Pride and Prejudice
    "https://www.gutenberg.org/cache/epub/84/pg84.txt",  # Frankenstein
    "https://www.gutenberg.org/cache/epub/11/pg11.txt",  # Alice's Adventures in Wonderland
    "https://www.gutenberg.org/cache/epub/1661/pg1661.txt",  # The Adventures of Sherlock Holmes
    "https://www.gutenberg.org/cache/epub/345/pg345.txt",  # Dracula
]
