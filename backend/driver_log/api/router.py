from fastapi import APIRouter

from driver_log.api.drivers import drivers_router
from driver_log.api.leaves import driver_leaves_router, leave_decisions_router
from driver_log.api.payroll import driver_payroll_router, payroll_router
from driver_log.api.reports import reports_router
from driver_log.api.shifts import shifts_router

api_router = APIRouter()
api_router.include_router(drivers_router)
api_router.include_router(shifts_router)
api_router.include_router(driver_leaves_router)
api_router.include_router(leave_decisions_router)
api_router.include_router(driver_payroll_router)
api_router.include_router(payroll_router)
api_router.include_router(reports_router)
