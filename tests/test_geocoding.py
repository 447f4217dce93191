from sales_intel.config.settings import FALLBACK_COORDINATES
from sales_intel.geocoding import GeocodeCache, generate_map_data
from sales_intel.stages.stage2_merge import merge_datasets


class RecordingGeocoder:
    def __init__(self, answers=None, fail=False):
        self.answers = answers or {}
        self.calls = []
        self.fail = fail

    def geocode(self, city, state, country):
        self.calls.append((city, state, country))
        if self.fail:
            raise RuntimeError("quota exceeded")
        return self.answers.get(city)


def _records(make_company, make_person, count, **company_fields):
    companies = [make_company(f"Co {i}", **company_fields) for i in range(count)]
    people = [make_person(f"P {i}", f"Co {i}") for i in range(count)]
    return merge_datasets(companies, people)


def test_without_geocoder_uses_fallback_coordinates(make_company, make_person):
    records = _records(make_company, make_person, 12)

    points = generate_map_data(records)

    assert len(points) == 10
    assert (points[0].lat, points[0].lng) == FALLBACK_COORDINATES[0]
    assert (points[9].lat, points[9].lng) == FALLBACK_COORDINATES[9]
    assert all(p.approximate for p in points)


def test_fallback_cycles_with_larger_limit(make_company, make_person):
    records = _records(make_company, make_person, 12)
    points = generate_map_data(records, limit=12)
    assert (points[11].lat, points[11].lng) == FALLBACK_COORDINATES[1]


def test_geocoder_answers_are_cached(make_company, make_person):
    records = _records(make_company, make_person, 3, city="Austin", state="TX", country="USA")
    geocoder = RecordingGeocoder({"Austin": (30.2672, -97.7431)})
    cache = GeocodeCache()

    points = generate_map_data(records, geocoder=geocoder, cache=cache)

    assert [(p.lat, p.lng) for p in points] == [(30.2672, -97.7431)] * 3
    assert not any(p.approximate for p in points)
    assert len(geocoder.calls) == 1
    assert cache.hits == 2 and cache.misses == 1


def test_cache_keys_ignore_case_and_padding():
    assert GeocodeCache.key(" Austin", "tx", None) == GeocodeCache.key("austin", "TX ", "")


def test_geocoder_miss_is_cached_and_falls_back(make_company, make_person):
    records = _records(make_company, make_person, 2, city="Atlantis")
    geocoder = RecordingGeocoder()

    points = generate_map_data(records, geocoder=geocoder)

    assert all(p.approximate for p in points)
    assert len(geocoder.calls) == 1


def test_geocoder_errors_degrade_to_fallback(make_company, make_person, caplog):
    records = _records(make_company, make_person, 1, city="Austin")

    with caplog.at_level("WARNING"):
        points = generate_map_data(records, geocoder=RecordingGeocoder(fail=True))

    assert points[0].approximate
    assert "Geocoding failed" in caplog.text


def test_records_without_location_skip_geocoder(make_company, make_person):
    records = _records(make_company, make_person, 1)
    geocoder = RecordingGeocoder()

    generate_map_data(records, geocoder=geocoder)

    assert geocoder.calls == []
