"""
FastAPI REST API Module

Thin HTTP layer over the ledger service: account creation, balance
queries, transaction history by date range and new transactions.
Every ledger error is reported to the client as 400 Bad Request.
"""

from decimal import Decimal
from datetime import date
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException, Depends, Query, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from . import __version__
from .config import get_config
from .exceptions import LedgerError
from .logging_config import setup_logging
from .service import LedgerService
from .store import LedgerStore
from .transactions import TransactionRequest


class TransactionRequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: int = Field(..., alias="accountId")
    transaction_type: Optional[str] = Field(None, alias="transactionType", description="Deposit or Withdrawal")
    amount: Decimal = Field(..., description="Signed amount, negative for withdrawals")

    def to_request(self) -> TransactionRequest:
        return TransactionRequest(
            account_id=self.account_id,
            transaction_type=self.transaction_type,
            amount=self.amount
        )


def get_ledger_service(request: Request) -> LedgerService:
    return request.app.state.ledger_service


def create_app(service: Optional[LedgerService] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Ledger API",
        description="In-memory account ledger with per-account concurrency control",
        version=__version__,
    )
    app.state.ledger_service = service or LedgerService(LedgerStore())

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "ledger_api",
            "version": __version__
        }

    @app.post("/accounts")
    def create_account(
        account_id: int = Query(..., alias="accountId"),
        balance: Decimal = Query(...),
        ledger: LedgerService = Depends(get_ledger_service)
    ) -> bool:
        """Create an account with an opening balance"""
        try:
            return ledger.create_account(account_id, balance)
        except LedgerError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Error:{e}")

    @app.get("/accounts/{account_id}/balance")
    def get_current_balance(
        account_id: int,
        ledger: LedgerService = Depends(get_ledger_service)
    ) -> float:
        """Get the current balance of an account"""
        try:
            return float(ledger.get_balance(account_id))
        except LedgerError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Error:{e}")

    @app.get("/accounts/{account_id}/transactions")
    def get_transactions(
        account_id: int,
        start_date: date = Query(..., alias="startDate"),
        end_date: date = Query(..., alias="endDate"),
        ledger: LedgerService = Depends(get_ledger_service)
    ) -> List[Dict[str, Any]]:
        """Get transactions within a date range, most recent first"""
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Error:startDate must not be after endDate"
            )
        try:
            transactions = ledger.list_transactions(account_id, start_date, end_date)
        except LedgerError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Error:{e}")

        date_format = get_config().transaction_date_format
        return [transaction.to_dict(date_format) for transaction in transactions]

    @app.post("/accounts/{account_id}/transactions", status_code=status.HTTP_201_CREATED)
    def add_transaction(
        account_id: int,
        transaction_request: TransactionRequestModel,
        ledger: LedgerService = Depends(get_ledger_service)
    ):
        """Apply a deposit or withdrawal; the body's accountId is authoritative"""
        try:
            ledger.record_transaction(transaction_request.to_request())
        except LedgerError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Error:{e}")
        return Response(status_code=status.HTTP_201_CREATED)

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(config)
    uvicorn.run(
        "ledger_api.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
