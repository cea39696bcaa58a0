# Bilingual notices shown to the user, Hindi first.

RECORD_SAVED = "रिकॉर्ड सेव हो गया! / Record saved!"
RECORD_DELETED = "रिकॉर्ड डिलीट हो गया / Record deleted"
RECORD_SAVE_FAILED = "रिकॉर्ड सेव नहीं हुआ / Failed to save record"
RECORD_NOT_FOUND = "रिकॉर्ड नहीं मिला / Record not found"

PARSE_OK = "रिकॉर्ड पार्स हो गया! / Record parsed successfully!"
PARSE_NO_MATCH = "समझ नहीं आया। कृपया फिर से बोलें। / Could not understand. Please try again."

NAME_REQUIRED = "कृपया नाम भरें / Please fill customer name"
MILK_FIELDS_REQUIRED = "कृपया दूध की मात्रा और रकम भरें / Please fill milk quantity and amount"
PAYMENT_AMOUNT_REQUIRED = "कृपया रकम भरें / Please fill payment amount"

CUSTOMER_EXISTS = "ग्राहक पहले से है / Customer already exists"

START_SPEAKING = "बोलना शुरू करें... / Start speaking..."
NO_SPEECH = "कुछ सुनाई नहीं दिया / No speech detected"
MIC_PERMISSION = "माइक की अनुमति दें / Please allow microphone access"
SPEECH_ERROR = "आवाज़ की समस्या / Speech recognition error"


def large_amount(amount) -> str:
    return f"Large amount: ₹{amount:g}. Are you sure? / बड़ी रकम: ₹{amount:g}। क्या आप सुनिश्चित हैं?"


def migrated(count: int) -> str:
    return f"Migrated {count} records to database"
