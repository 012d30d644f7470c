"""Integer identifier generation."""


async def generate_unique_id(collection, counters, sequence_name: str) -> int:
    """
    Take the next free integer id for a collection.

    Ids come from a per-collection sequence document in ``counters``. Callers
    may also supply their own ids, so a value from the sequence that is
    already in use is skipped and the next one is tried.

    Args:
        collection: MongoDB collection the id is for
        counters: MongoDB collection holding sequence documents
        sequence_name: Key of the sequence document (usually the collection name)

    Returns:
        An id not present in ``collection``

    Examples:
        Sequence at 4, no document with _id 5: returns 5
        Sequence at 4, caller already created _id 5: returns 6
    """
    while True:
        counter = await counters.find_one_and_update(
            {"_id": sequence_name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=True,
        )
        candidate = int(counter["seq"])

        existing = await collection.find_one({"_id": candidate})
        if not existing:
            return candidate
