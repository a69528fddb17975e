from nearby.schemas.location import BoundingBox, MapCenter


def bbox_center(box: BoundingBox) -> MapCenter:
    return MapCenter(
        lat=(box.min_lat + box.max_lat) / 2,
        lon=(box.min_lon + box.max_lon) / 2,
    )
