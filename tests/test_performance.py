import time

import pytest

from courierdesk.services.fees import compute_package_costs
from tests.fixtures.test_data import generate_package_payload


@pytest.mark.performance
def test_cost_computation_is_cheap():
    """10k cost breakdowns < 1s; costs are computed on every read."""
    packages = [generate_package_payload(weight=i % 40 / 3) for i in range(10_000)]
    
    start = time.time()
    for pkg in packages:
        compute_package_costs(pkg)
    duration = time.time() - start
    
    assert duration < 1.0, f"Cost computation took {duration:.2f}s"


@pytest.mark.performance
async def test_listing_performance(client, staff_headers, customer):
    """Listing 100 packages with costs < 2s."""
    for i in range(100):
        response = await client.post(
            "/api/v1/packages",
            json=generate_package_payload(tracking_number=f"TAS-PERF{i:03d}"),
            headers=staff_headers,
        )
        assert response.status_code == 201
    
    start = time.time()
    response = await client.get("/api/v1/packages", params={"per_page": 100}, headers=staff_headers)
    duration = time.time() - start
    
    assert response.status_code == 200
    assert len(response.json()["packages"]) == 100
    assert duration < 2.0, f"Listing took {duration:.3f}s"
