from portal.services import reports


def test_operation_counts_cover_every_state():
    allocations = [
        {'operationStatus': 'Scheduled', 'status': 'Active'},
        {'operationStatus': 'InProgress', 'status': 'Active'},
        {'operationStatus': 'Scheduled', 'status': 'Active'},
        {'operationStatus': 'Completed', 'status': 'InActive'},
    ]
    assert reports.operation_status_counts(allocations) == {
        'Scheduled': 2, 'InProgress': 1, 'Completed': 0, 'Cancelled': 0, 'Postponed': 0,
    }


def test_lab_tests_per_category_skip_inactive():
    tests = [
        {'testCategory': 'Blood', 'status': 'active'},
        {'testCategory': 'Blood', 'status': 'active'},
        {'testCategory': 'Urine', 'status': 'inactive'},
        {'testCategory': '', 'status': 'active'},
    ]
    assert reports.tests_per_category(tests) == {'Blood': 2, 'Uncategorised': 1}
