import unittest
import uuid

from taxisim.models.request import Request, RequestState
from taxisim.models.taxi import Taxi
from taxisim.simulation.config import MAX_WAITING_TIME, FULFILLMENT_TIME


class TestRequest(unittest.TestCase):
    """Test the Request data structure"""

    def test_request_creation(self):
        req = Request(created_at=7)
        self.assertIsInstance(req.id, uuid.UUID)
        self.assertEqual(req.remaining_waiting_time, MAX_WAITING_TIME)
        self.assertEqual(req.fulfillment_time, FULFILLMENT_TIME)
        self.assertIsNone(req.assigned_taxi)
        self.assertEqual(req.created_at, 7)
        self.assertIsNone(req.assigned_at)
        self.assertIsNone(req.archived_at)
        self.assertEqual(req.state, RequestState.WAITING)

    def test_ids_are_unique(self):
        ids = {Request().id for _ in range(50)}
        self.assertEqual(len(ids), 50)

    def test_waiting_request_spends_waiting_budget(self):
        req = Request()
        req.tick()
        self.assertEqual(req.remaining_waiting_time, MAX_WAITING_TIME - 1)
        self.assertEqual(req.fulfillment_time, FULFILLMENT_TIME)

    def test_assigned_request_spends_fulfillment_budget(self):
        req = Request()
        taxi = Taxi()
        req.assign(taxi.id, 3)
        req.tick()
        self.assertEqual(req.state, RequestState.ASSIGNED)
        self.assertEqual(req.assigned_taxi, taxi.id)
        self.assertEqual(req.assigned_at, 3)
        self.assertEqual(req.remaining_waiting_time, MAX_WAITING_TIME)
        self.assertEqual(req.fulfillment_time, FULFILLMENT_TIME - 1)

    def test_dies_when_either_budget_hits_zero(self):
        waiting = Request()
        waiting.remaining_waiting_time = 1
        waiting.tick()
        self.assertFalse(waiting.is_alive())
        self.assertEqual(waiting.state, RequestState.ARCHIVED)
        self.assertTrue(waiting.was_abandoned())
        self.assertFalse(waiting.was_fulfilled())

        driven = Request()
        driven.assign(uuid.uuid4(), 0)
        driven.fulfillment_time = 1
        driven.tick()
        self.assertFalse(driven.is_alive())
        self.assertTrue(driven.was_fulfilled())
        self.assertFalse(driven.was_abandoned())


class TestTaxi(unittest.TestCase):

    def test_taxi_occupancy(self):
        taxi = Taxi()
        self.assertFalse(taxi.is_occupied)
        taxi.occupy()
        self.assertTrue(taxi.is_occupied)
        taxi.release()
        self.assertFalse(taxi.is_occupied)

    def test_taxi_ids_are_unique(self):
        self.assertNotEqual(Taxi().id, Taxi().id)


if __name__ == '__main__':
    unittest.main()
